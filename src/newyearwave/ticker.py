"""Clock-owning scheduler: samples UTC once per interval and pushes fresh snapshots."""

import threading
from collections.abc import Callable
from datetime import datetime

from loguru import logger

from newyearwave.models import WaveSnapshot
from newyearwave.wave import snapshot, utc_now

Subscriber = Callable[[WaveSnapshot], None]


class WaveTicker:
    """Recompute the wave on every tick and hand it to subscribers.

    Nothing is cached between ticks; each snapshot is derived from the
    sampled instant alone. The owner stops ``run`` by setting its event.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        interval: float = 1.0,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")
        self._clock = clock
        self.interval = interval
        self._subscribers: list[Subscriber] = []
        self.last: WaveSnapshot | None = None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback; returns a function that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def tick(self) -> WaveSnapshot:
        snap = snapshot(self._clock())
        self.last = snap
        logger.trace(
            "tick {} midnight={:.3f} phase={}",
            snap.instant.isoformat(),
            snap.midnight_lon,
            snap.phase.value,
        )
        for callback in list(self._subscribers):
            callback(snap)
        return snap

    def run(self, stop: threading.Event, max_ticks: int | None = None) -> int:
        """Tick every interval until stop is set or max_ticks is reached.

        Returns:
            Number of ticks performed.
        """
        ticks = 0
        while not stop.is_set():
            self.tick()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            stop.wait(self.interval)
        logger.debug("Ticker stopped after {} ticks", ticks)
        return ticks
