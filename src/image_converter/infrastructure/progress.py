"""Progress sink implementations."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from tqdm import tqdm

logger = logging.getLogger(__name__)


class NullProgressSink:
    """Discard all progress notifications."""

    def total(self, count: int) -> None:
        del count

    def tick(self) -> None:
        return None


class CallbackProgressSink:
    """Forward notifications to plain callables.

    Used by hosting shells that relay ``total``/``progress`` events over their
    own transport.
    """

    def __init__(
        self,
        on_total: Callable[[int], None] | None = None,
        on_tick: Callable[[], None] | None = None,
    ) -> None:
        self._on_total = on_total
        self._on_tick = on_tick
        self._lock = threading.Lock()

    def total(self, count: int) -> None:
        if self._on_total is not None:
            self._on_total(count)

    def tick(self) -> None:
        if self._on_tick is None:
            return
        with self._lock:
            self._on_tick()


class CountingProgressSink:
    """Keep the announced total and a monotonically increasing tick count."""

    def __init__(self) -> None:
        self.announced: list[int] = []
        self.ticks = 0
        self._lock = threading.Lock()

    def total(self, count: int) -> None:
        self.announced.append(count)

    def tick(self) -> None:
        with self._lock:
            self.ticks += 1


class LoggingProgressSink(CountingProgressSink):
    """Report progress through the module logger at debug level."""

    def __init__(self, label: str) -> None:
        super().__init__()
        self.label = label

    def total(self, count: int) -> None:
        super().total(count)
        logger.debug("%s: %d item(s) queued", self.label, count)

    def tick(self) -> None:
        super().tick()
        logger.debug("%s: %d item(s) processed", self.label, self.ticks)


class TqdmProgressSink:
    """Render progress as a ``tqdm`` bar on stderr."""

    def __init__(self, desc: str, unit: str = "img", disable: bool = False) -> None:
        self._bar = tqdm(desc=desc, unit=unit, total=None, disable=disable)
        self._lock = threading.Lock()

    def total(self, count: int) -> None:
        with self._lock:
            self._bar.total = count
            self._bar.refresh()

    def tick(self) -> None:
        with self._lock:
            self._bar.update(1)

    def close(self) -> None:
        self._bar.close()

    def __enter__(self) -> TqdmProgressSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
