"""Low-level request handlers for buckets and objects.

Each function issues exactly one request through the client's transport and
parses the response. Prefer :class:`storage_client.Storage` unless you need
direct control over individual requests.
"""

from . import bucket_handler, object_handler

__all__ = ["bucket_handler", "object_handler"]
