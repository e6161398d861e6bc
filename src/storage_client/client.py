"""Client configuration and connection context.

A :class:`StorageClient` bundles the connection settings (base URL and
credentials) with the transport used to reach the API. It is passed
explicitly to every handler call; nothing is registered globally.

Example:
    config = ClientConfig(
        base_url="https://project.supabase.co",
        api_key="service-role-key",
    )
    client = StorageClient(config)
    url = client.retrieve_storage_url("/bucket")
    # https://project.supabase.co/storage/v1/bucket
"""

import threading
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from storage_client import __version__
from storage_client.core import get_logger
from storage_client.core.config import Settings
from storage_client.core.exceptions import ValidationError
from storage_client.transport import HttpxTransport, Transport

logger = get_logger(__name__)

CLIENT_INFO = f"storage-client-python/{__version__}"


class ClientConfig(BaseModel):
    """Connection settings for the storage API."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = Field(..., description="Project base URL")
    api_key: str = Field(..., description="API key sent in the apikey header")
    access_token: Optional[str] = Field(
        None, description="Bearer token, defaults to the API key"
    )
    storage_path: str = Field("/storage/v1", description="Storage API mount path")
    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra headers sent with every request"
    )

    @property
    def storage_url(self) -> str:
        base = self.base_url.rstrip("/")
        mount = self.storage_path.strip("/")
        return f"{base}/{mount}" if mount else base

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientConfig":
        """Build a config from environment settings.

        Raises:
            ValidationError: If the URL or API key is not configured
        """
        if not settings.url or not settings.api_key:
            raise ValidationError(
                "Storage URL and API key are required "
                "(STORAGE_CLIENT_URL, STORAGE_CLIENT_API_KEY)"
            )
        return cls(
            base_url=settings.url,
            api_key=settings.api_key,
            access_token=settings.access_token,
            timeout=settings.timeout,
        )


class StorageClient:
    """Connection context handed to the resource handlers."""

    def __init__(self, config: ClientConfig, transport: Optional[Transport] = None):
        """Initialize the client.

        Args:
            config: Connection settings
            transport: Transport to issue requests with; an
                :class:`HttpxTransport` is created on first use if omitted
        """
        self.config = config
        self._transport = transport
        self._owns_transport = transport is None
        self._lock = threading.Lock()
        logger.info("Storage client initialized", storage_url=config.storage_url)

    @property
    def transport(self) -> Transport:
        """Get or create the transport instance."""
        with self._lock:
            if self._transport is None:
                self._transport = HttpxTransport(timeout=self.config.timeout)
                self._owns_transport = True
            return self._transport

    def close(self) -> None:
        """Close the transport if this client created it."""
        with self._lock:
            if self._transport is not None and self._owns_transport:
                self._transport.close()
                self._transport = None

    def __enter__(self) -> "StorageClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def retrieve_storage_url(self, uri: str) -> str:
        """Join a relative endpoint path onto the storage API URL."""
        return self.config.storage_url + "/" + uri.lstrip("/")

    def apply_client_headers(
        self, extra: Optional[dict[str, str]] = None
    ) -> dict[str, str]:
        """Standard identification and auth headers, merged with ``extra``."""
        token = self.config.access_token or self.config.api_key
        headers = {
            "x-client-info": CLIENT_INFO,
            "apikey": self.config.api_key,
            "authorization": f"Bearer {token}",
            **self.config.headers,
        }
        if extra:
            headers.update(extra)
        return headers
