"""Interface between the resource handlers and the HTTP layer."""

from typing import Any, Iterator, Mapping, Optional, Protocol

Headers = Mapping[str, str]


class Transport(Protocol):
    """Issues one HTTP request per call.

    JSON-returning methods give back the decoded body on a 2xx response and
    raise :class:`~storage_client.core.exceptions.TransportError` otherwise.
    Implementations do not retry.
    """

    def get(
        self,
        url: str,
        body: Any = None,
        headers: Optional[Headers] = None,
        resolve_json: bool = True,
    ) -> Any: ...

    def post(self, url: str, body: Any = None, headers: Optional[Headers] = None) -> Any: ...

    def put(self, url: str, body: Any = None, headers: Optional[Headers] = None) -> Any: ...

    def delete(self, url: str, body: Any = None, headers: Optional[Headers] = None) -> Any: ...

    def upload(
        self, method: str, url: str, file_path: str, headers: Optional[Headers] = None
    ) -> Any: ...

    def stream(self, url: str, headers: Optional[Headers] = None) -> Iterator[bytes]: ...
