"""Maintenance sweep that removes translation rows with slot > 2.

Current write logic never produces such rows; the sweep exists so that an
extended slot scheme can never leave stale history behind. In background
mode a save only signals the worker thread, so write latency does not
depend on the cost of the sweep.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SlotSweeper:
    def __init__(self, purge: Callable[[], int], mode: str = "background") -> None:
        if mode not in {"background", "inline"}:
            raise ValueError(f"unknown sweep mode: {mode}")
        self._purge = purge
        self.mode = mode
        self._wakeup = threading.Event()
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.runs = 0

    def run_once(self) -> int:
        removed = self._purge()
        self.runs += 1
        if removed:
            logger.info("Purged translation rows above slot 2", extra={"removed": removed})
        return removed

    def request(self) -> None:
        """Ask for a sweep after a save."""
        if self.mode == "inline":
            self.run_once()
            return
        self._wakeup.set()

    def start(self) -> None:
        if self.mode != "background" or self._thread is not None:
            return
        self._stopping.clear()
        self._thread = threading.Thread(target=self._loop, name="slot-sweeper", daemon=True)
        self._thread.start()
        logger.info("Slot sweeper started")

    def stop(self, timeout: float = 5.0) -> None:
        if self._thread is None:
            return
        self._stopping.set()
        self._wakeup.set()
        self._thread.join(timeout)
        self._thread = None
        logger.info("Slot sweeper stopped")

    def _loop(self) -> None:
        while not self._stopping.is_set():
            self._wakeup.wait()
            self._wakeup.clear()
            if self._stopping.is_set():
                break
            try:
                self.run_once()
            except Exception:  # noqa: BLE001 - the worker must survive a failed sweep
                logger.exception("Slot sweep failed")
