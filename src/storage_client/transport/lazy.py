"""Deferred, single-pass download streams."""

from typing import Callable, Iterator

from storage_client.core import get_logger
from storage_client.core.exceptions import StreamConsumedError

logger = get_logger(__name__)


class LazyDownload:
    """Iterable over the bytes of an object, fetched on first iteration.

    Nothing is requested until the first chunk is pulled. The body is not
    buffered, so a second iteration cannot be served and raises
    :class:`StreamConsumedError` instead of returning stale or empty data.
    """

    def __init__(self, opener: Callable[[], Iterator[bytes]], url: str):
        self._opener = opener
        self.url = url
        self._started = False

    @property
    def consumed(self) -> bool:
        return self._started

    def __iter__(self) -> Iterator[bytes]:
        if self._started:
            raise StreamConsumedError(f"Download stream already consumed: {self.url}")
        self._started = True
        logger.debug("Lazy download started", url=self.url)
        return iter(self._opener())

    def __repr__(self) -> str:
        state = "consumed" if self._started else "pending"
        return f"<LazyDownload {self.url} ({state})>"
