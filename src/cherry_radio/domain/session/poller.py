"""Background metadata polling for one stream connection."""

import threading
from typing import Any, Callable, Optional

from loguru import logger


class MetadataPoller:
    """Calls ``tick(epoch)`` right away and then every ``interval`` seconds.

    One poller belongs to one connection epoch. Cancelling only sets an
    event: a tick blocked on the network finishes on its own and the session
    discards its result by epoch.
    """

    def __init__(self, epoch: int, tick: Callable[[int], Any], interval: float):
        self.epoch = epoch
        self.interval = interval
        self._tick = tick
        self._cancelled = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=f"MetadataPoller-{epoch}",
            daemon=True,
        )

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        """Start polling in a daemon thread."""
        self._thread.start()

    def cancel(self) -> None:
        """Stop scheduling further ticks."""
        self._cancelled.set()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the polling thread to exit."""
        if self._thread.is_alive():
            self._thread.join(timeout)

    def _run(self) -> None:
        # Keep poll chatter out of the UI
        threading.current_thread().silent_logging = True

        while not self._cancelled.is_set():
            try:
                self._tick(self.epoch)
            except Exception:
                logger.exception(f"Metadata poll failed (epoch {self.epoch})")

            if self._cancelled.wait(self.interval):
                break

        logger.debug(f"Metadata poller for epoch {self.epoch} stopped")
