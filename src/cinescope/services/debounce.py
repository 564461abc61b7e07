import asyncio
from typing import Callable

DEFAULT_DELAY = 0.5


class DebouncedInput:
    """Trailing-edge debounce of a raw text value.

    Every ``set_raw`` call restarts the quiet period. Once the raw value has
    been stable for ``delay`` seconds it becomes the committed value and
    ``on_commit`` is called with it, unless it equals the previous commit.
    Must be used from inside a running event loop.
    """

    def __init__(self, on_commit: Callable[[str], object] | None = None, delay: float = DEFAULT_DELAY):
        self.delay = delay
        self.on_commit = on_commit
        self._raw = ""
        self._committed = ""
        self._handle: asyncio.TimerHandle | None = None

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def committed(self) -> str:
        return self._committed

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def set_raw(self, value: str) -> None:
        self._raw = value
        self.cancel()
        self._handle = asyncio.get_running_loop().call_later(self.delay, self._settle)

    def flush(self) -> None:
        """Commit the raw value now instead of waiting for the quiet period."""
        self.cancel()
        self._settle()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _settle(self) -> None:
        self._handle = None
        if self._raw == self._committed:
            return
        self._committed = self._raw
        if self.on_commit:
            self.on_commit(self._committed)
