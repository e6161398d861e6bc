"""httpx-backed transport.

Wraps a single ``httpx.Client`` and maps every outcome onto the
storage-client exception hierarchy:

    - 2xx: decoded JSON body (or raw bytes / text where asked)
    - non-2xx: TransportError with the status code and server message
    - httpx network errors and timeouts: TransportError without a status
    - undecodable JSON: ParseError
    - unopenable upload source: FileNotFound, before any request
"""

import threading
from typing import Any, Iterator, Optional

import httpx

from storage_client.core import get_logger, get_tracer
from storage_client.core.exceptions import FileNotFound, ParseError, TransportError

from .base import Headers

logger = get_logger(__name__)
tracer = get_tracer(__name__)

DOWNLOAD_CHUNK_SIZE = 64 * 1024


class HttpxTransport:
    """Issues storage API requests through httpx."""

    def __init__(
        self,
        timeout: float = 30.0,
        http: Optional[httpx.Client] = None,
    ):
        """Initialize the transport.

        Args:
            timeout: Request timeout in seconds, used when creating the client
            http: Pre-configured httpx client to use instead of creating one;
                it stays open when the transport is closed
        """
        self.timeout = timeout
        self._http = http
        self._owns_http = http is None
        self._lock = threading.Lock()

    @property
    def http(self) -> httpx.Client:
        """Get or create the httpx client instance."""
        with self._lock:
            if self._http is None:
                self._http = httpx.Client(timeout=self.timeout)
                self._owns_http = True
                logger.debug("httpx client created", timeout=self.timeout)
            return self._http

    def close(self) -> None:
        """Close the httpx client if this transport created it."""
        with self._lock:
            if self._http is not None and self._owns_http:
                self._http.close()
                self._http = None

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Verbs

    def get(
        self,
        url: str,
        body: Any = None,
        headers: Optional[Headers] = None,
        resolve_json: bool = True,
    ) -> Any:
        response = self._send("GET", url, json=body, headers=headers)
        if resolve_json:
            return self._decode(response)
        return response.content

    def post(self, url: str, body: Any = None, headers: Optional[Headers] = None) -> Any:
        return self._decode(self._send("POST", url, json=body, headers=headers))

    def put(self, url: str, body: Any = None, headers: Optional[Headers] = None) -> Any:
        return self._decode(self._send("PUT", url, json=body, headers=headers))

    def delete(self, url: str, body: Any = None, headers: Optional[Headers] = None) -> Any:
        return self._decode(self._send("DELETE", url, json=body, headers=headers))

    def upload(
        self, method: str, url: str, file_path: str, headers: Optional[Headers] = None
    ) -> Any:
        """Send a local file as the request body without reading it into memory.

        Raises:
            FileNotFound: If ``file_path`` cannot be opened
        """
        try:
            source = open(file_path, "rb")
        except OSError as e:
            logger.warning("Upload source not readable", file_path=file_path)
            raise FileNotFound(file_path, e.strerror) from e

        with source:
            # httpx reads file objects in chunks
            response = self._send(method.upper(), url, content=source, headers=headers)
        return self._decode(response)

    def stream(self, url: str, headers: Optional[Headers] = None) -> Iterator[bytes]:
        """Yield the response body of a GET in chunks.

        This is a generator: the request is only sent once the first chunk
        is requested.
        """
        with tracer.start_as_current_span(
            "storage.request", attributes={"http.method": "GET", "http.url": url}
        ) as span:
            logger.debug("Streaming request", url=url)
            try:
                with self.http.stream("GET", url, headers=headers) as response:
                    span.set_attribute("http.status_code", response.status_code)
                    if response.is_error:
                        response.read()
                        self._raise_for_status(response)
                    yield from response.iter_bytes(DOWNLOAD_CHUNK_SIZE)
            except httpx.HTTPError as e:
                logger.error("Streamed request failed", url=url, error=str(e))
                raise TransportError(f"Request to {url} failed: {e}") from e

    # Helpers

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        with tracer.start_as_current_span(
            "storage.request", attributes={"http.method": method, "http.url": url}
        ) as span:
            logger.debug("Sending request", method=method, url=url)
            try:
                response = self.http.request(method, url, **kwargs)
            except httpx.HTTPError as e:
                logger.error("Request failed", method=method, url=url, error=str(e))
                raise TransportError(f"{method} {url} failed: {e}") from e

            span.set_attribute("http.status_code", response.status_code)
            if response.is_error:
                self._raise_for_status(response)
            return response

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text or None

        message = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error")
        if not message:
            message = body if isinstance(body, str) else response.reason_phrase

        logger.warning(
            "Storage API returned an error",
            status_code=response.status_code,
            url=str(response.request.url),
            message=message,
        )
        raise TransportError(str(message), status_code=response.status_code, body=body)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None

        content_type = response.headers.get("content-type", "")
        if "json" not in content_type:
            return response.text

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(
                f"Invalid JSON in response from {response.request.url}: {e}"
            ) from e
