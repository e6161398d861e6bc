"""HTTP transport used by the resource handlers."""

from .base import Transport
from .httpx_transport import HttpxTransport
from .lazy import LazyDownload

__all__ = ["HttpxTransport", "LazyDownload", "Transport"]
