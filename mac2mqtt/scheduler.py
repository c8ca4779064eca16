"""
Periodic status refresh

Each status kind gets its own daemon thread that sleeps for a fixed interval
and then runs its refresh, so a slow capability read for one kind never
delays the others. There is no jitter or drift correction.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .config import IntervalConfig
from .publisher import StatusPublisher

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefreshJob:
    name: str
    interval: float
    action: Callable[[], object]


@dataclass
class StatusScheduler:
    jobs: list[RefreshJob]
    logger: logging.Logger = field(default=LOGGER)
    _threads: list[threading.Thread] = field(default_factory=list, init=False)
    _stop_event: threading.Event = field(default_factory=threading.Event, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    @classmethod
    def for_publisher(
        cls,
        publisher: StatusPublisher,
        intervals: IntervalConfig,
        logger: logging.Logger | None = None,
    ) -> StatusScheduler:
        jobs = [
            RefreshJob("alive", intervals.alive, publisher.publish_alive),
            RefreshJob("volume", intervals.volume, publisher.publish_volume_and_mute),
            RefreshJob("battery", intervals.battery, publisher.publish_battery),
            RefreshJob("brightness", intervals.brightness, publisher.publish_brightness),
        ]
        return cls(jobs=jobs, logger=logger or LOGGER)

    @classmethod
    def from_jobs(cls, jobs: Iterable[RefreshJob], logger: logging.Logger | None = None) -> StatusScheduler:
        return cls(jobs=list(jobs), logger=logger or LOGGER)

    def start(self) -> None:
        with self._lock:
            if self._threads:
                return
            self._stop_event.clear()
            for job in self.jobs:
                if job.interval <= 0:
                    raise ValueError(f"Refresh interval for {job.name} must be positive")
                thread = threading.Thread(target=self._run, args=(job,), name=f"mac2mqtt-{job.name}", daemon=True)
                self._threads.append(thread)
                thread.start()
            self.logger.info(
                "[scheduler] Started refresh timers: %s",
                ", ".join(f"{job.name}={job.interval:g}s" for job in self.jobs),
            )

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._lock:
            threads = self._threads
            self._threads = []
        self._stop_event.set()
        for thread in threads:
            thread.join(timeout=timeout)

    def is_running(self) -> bool:
        with self._lock:
            threads = list(self._threads)
        return any(thread.is_alive() for thread in threads)

    def _run(self, job: RefreshJob) -> None:
        while not self._stop_event.wait(job.interval):
            try:
                job.action()
            except Exception as exc:  # pylint: disable=broad-except
                self.logger.error("[scheduler] %s refresh failed: %s", job.name, exc, exc_info=True)
