import threading
import time
from typing import Callable, Optional

from shared.common_utils.logger import logger


class ReloadScheduler:
    """
    Runs a reload callback on a daemon thread at a fixed rate.

    Ticks are measured from the first fire. A reload that overruns one or more
    periods skips the missed ticks, so reloads never overlap.
    """

    def __init__(self, reload: Callable[[], None], name: str = "config-reloader"):
        self._reload = reload
        self._name = name
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self.interval: float = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, interval_seconds: float) -> bool:
        """Starts the reload thread. Returns False when reloading is disabled (interval <= 0)."""
        if interval_seconds <= 0:
            logger.info("Periodic configuration reload disabled")
            return False

        with self._lock:
            if self.running:
                raise RuntimeError(f"{self._name} is already running")
            self.interval = interval_seconds
            self._stop_event = threading.Event()
            self._thread = threading.Thread(target=self._run, args=(self._stop_event,), name=self._name, daemon=True)
            self._thread.start()

        logger.info(f"Reloading configuration every {interval_seconds} seconds")
        return True

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stops the thread, waiting for an in-flight reload to finish."""
        with self._lock:
            thread = self._thread
            stop_event = self._stop_event
            self._thread = None
        if thread is None:
            return

        stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning(f"{self._name} did not stop within {timeout} seconds")
        logger.info(f"{self._name} stopped")

    def _run(self, stop_event: threading.Event) -> None:
        next_fire = time.monotonic() + self.interval
        while not stop_event.wait(max(0.0, next_fire - time.monotonic())):
            try:
                self._reload()
            except Exception as e:
                logger.error(f"Configuration reload failed: {e!r}", exc_info=True)

            next_fire += self.interval
            now = time.monotonic()
            if next_fire <= now:
                skipped = int((now - next_fire) // self.interval) + 1
                logger.warning(f"Configuration reload overran its interval, skipping {skipped} tick(s)")
                next_fire += skipped * self.interval
