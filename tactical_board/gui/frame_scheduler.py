"""
Qt Frame Scheduler - Drives the playback clock from the Qt event loop

A single QTimer fires at the configured frame rate while callbacks are
pending; each callback receives the wall-clock seconds measured since the
previous frame.
"""

from itertools import count
from typing import Dict, Optional

from PyQt6.QtCore import QElapsedTimer, QTimer
from loguru import logger

from tactical_board.core.playback import FrameCallback, FrameScheduler


class QtFrameScheduler(FrameScheduler):
    """
    FrameScheduler backed by a QTimer.

    The timer runs only while at least one frame is requested.
    """

    def __init__(self, frame_rate: Optional[int] = None):
        if frame_rate is None:
            from config import settings
            frame_rate = settings.frame_rate

        self.frame_rate = frame_rate
        self._pending: Dict[int, FrameCallback] = {}
        self._handles = count(1)

        self._elapsed = QElapsedTimer()

        # Frame timer
        self._timer = QTimer()
        self._timer.setInterval(max(1, int(1000 / frame_rate)))
        self._timer.timeout.connect(self._on_timeout)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        if not self._timer.isActive():
            self._elapsed.start()
            self._timer.start()
            logger.debug(f"Frame timer started at {self.frame_rate} fps")
        return handle

    def cancel_frame(self, handle: int):
        self._pending.pop(handle, None)
        if not self._pending and self._timer.isActive():
            self._timer.stop()
            logger.debug("Frame timer stopped")

    def _on_timeout(self):
        delta = self._elapsed.restart() / 1000.0 if self._elapsed.isValid() else 0.0

        due = list(self._pending.values())
        self._pending.clear()
        for callback in due:
            callback(delta)

        if not self._pending:
            self._timer.stop()

    def release(self):
        """Stop the timer and drop pending callbacks"""
        self._pending.clear()
        self._timer.stop()
