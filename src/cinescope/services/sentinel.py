from typing import Callable

DEFAULT_THRESHOLD = 1000


class ScrollSentinel:
    """Raises ``on_bottom`` when the viewport comes within ``threshold`` of the content end.

    The signal is gated on the consumer's ``is_fetching`` flag: while the
    consumer has a load-more fetch running, scrolling inside the zone raises
    nothing. The sentinel only reads that flag; the consumer clears it when
    its fetch completes.
    """

    def __init__(
        self,
        on_bottom: Callable[[], object],
        is_fetching: Callable[[], bool] = lambda: False,
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self.on_bottom = on_bottom
        self.is_fetching = is_fetching
        self.threshold = threshold

    def is_near_bottom(self, viewport_height: float, scroll_offset: float, content_height: float) -> bool:
        return viewport_height + scroll_offset >= content_height - self.threshold

    def observe(self, viewport_height: float, scroll_offset: float, content_height: float) -> bool:
        """Feed one scroll position; returns True when the signal was raised."""
        if self.is_fetching():
            return False
        if not self.is_near_bottom(viewport_height, scroll_offset, content_height):
            return False
        self.on_bottom()
        return True
