"""
Tactical Board - Playback Clock
Cooperative single-threaded playback state machine.

The clock never sleeps or spawns threads. Time advances only when a frame
scheduler calls back with an elapsed delta (or a test calls tick() directly).
"""

from abc import ABC, abstractmethod
from enum import Enum
from itertools import count
from typing import Callable, Dict, List, Optional

from loguru import logger

from tactical_board.exceptions import InvalidDurationError, InvalidSpeedError

FrameCallback = Callable[[float], None]
TimeListener = Callable[[float], None]
StateListener = Callable[["PlaybackState"], None]


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class FrameScheduler(ABC):
    """Source of animation frames. Callbacks receive elapsed seconds."""

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> int:
        """Schedule callback for the next frame; returns a handle."""

    @abstractmethod
    def cancel_frame(self, handle: int):
        """Drop a pending frame request. Unknown handles are ignored."""


class ManualFrameScheduler(FrameScheduler):
    """
    Frame scheduler driven by explicit advance() calls.

    Used by tests and headless scripts to feed synthetic frame deltas.
    """

    def __init__(self):
        self._pending: Dict[int, FrameCallback] = {}
        self._handles = count(1)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int):
        self._pending.pop(handle, None)

    def advance(self, delta_seconds: float) -> int:
        """
        Fire every callback pending at the start of this frame.

        Returns:
            Number of callbacks fired
        """
        due = list(self._pending.items())
        self._pending.clear()
        for _, callback in due:
            callback(delta_seconds)
        return len(due)

    def run(self, frames: int, delta_seconds: float) -> int:
        """Advance up to `frames` frames, stopping early when nothing is pending."""
        fired = 0
        for _ in range(frames):
            if not self._pending:
                break
            self.advance(delta_seconds)
            fired += 1
        return fired


class PlaybackClock:
    """
    Playback state machine: stopped, playing, paused.

    Every change of current time (tick or seek) is published to time
    listeners in subscription order.
    """

    def __init__(
        self,
        duration: float,
        speed: float = 1.0,
        scheduler: Optional[FrameScheduler] = None,
        loop: bool = False
    ):
        if duration < 0:
            raise InvalidDurationError(duration, 0.0)
        if speed <= 0:
            raise InvalidSpeedError(speed)

        self._duration = duration
        self._speed = speed
        self._scheduler = scheduler
        self.loop = loop

        self._state = PlaybackState.STOPPED
        self._current_time = 0.0
        self._frame_handle: Optional[int] = None

        self._time_listeners: List[TimeListener] = []
        self._state_listeners: List[StateListener] = []

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def has_pending_frame(self) -> bool:
        return self._frame_handle is not None

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: TimeListener):
        self._time_listeners.append(listener)

    def unsubscribe(self, listener: TimeListener):
        if listener in self._time_listeners:
            self._time_listeners.remove(listener)

    def on_state_changed(self, listener: StateListener):
        self._state_listeners.append(listener)

    def _publish_time(self):
        for listener in list(self._time_listeners):
            listener(self._current_time)

    def _set_state(self, state: PlaybackState):
        if state is self._state:
            return
        self._state = state
        logger.debug(f"Playback {state.value} at {self._current_time:.2f}s")
        for listener in list(self._state_listeners):
            listener(state)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def play(self):
        """stopped|paused -> playing. Restarts from 0 when parked at the end."""
        if self._state is PlaybackState.PLAYING:
            return
        if self._duration > 0 and self._current_time >= self._duration:
            self._current_time = 0.0
            self._publish_time()

        self._set_state(PlaybackState.PLAYING)
        self._request_frame()

    def pause(self):
        """playing -> paused. Cancels the pending frame."""
        if self._state is not PlaybackState.PLAYING:
            return
        self._cancel_frame()
        self._set_state(PlaybackState.PAUSED)

    def toggle(self):
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def stop(self):
        """Any state -> stopped, rewound to 0."""
        self._cancel_frame()
        self._set_state(PlaybackState.STOPPED)
        if self._current_time != 0.0:
            self._current_time = 0.0
            self._publish_time()

    def seek(self, time: float):
        """Jump to time (clamped to [0, duration]). Playback state is kept."""
        self._current_time = max(0.0, min(time, self._duration))
        self._publish_time()

    def set_speed(self, speed: float):
        if speed <= 0:
            raise InvalidSpeedError(speed)
        self._speed = speed

    def set_duration(self, duration: float):
        if duration < 0:
            raise InvalidDurationError(duration, 0.0)
        self._duration = duration
        if self._current_time > duration:
            self.seek(duration)

    def tick(self, delta_seconds: float) -> float:
        """
        Advance playback by one frame.

        Args:
            delta_seconds: Wall-clock seconds since the previous frame

        Returns:
            Current time after the tick
        """
        if self._state is not PlaybackState.PLAYING:
            return self._current_time

        new_time = self._current_time + delta_seconds * self._speed

        if new_time >= self._duration:
            if self.loop and self._duration > 0:
                self._current_time = new_time % self._duration
                self._publish_time()
            else:
                self._current_time = self._duration
                self._cancel_frame()
                self._set_state(PlaybackState.PAUSED)
                self._publish_time()
        else:
            self._current_time = new_time
            self._publish_time()

        return self._current_time

    def release(self):
        """Teardown: stop scheduling frames and drop listeners."""
        self._cancel_frame()
        self._time_listeners.clear()
        self._state_listeners.clear()

    # ------------------------------------------------------------------
    # Frame scheduling
    # ------------------------------------------------------------------

    def _request_frame(self):
        if self._scheduler is None or self._frame_handle is not None:
            return
        self._frame_handle = self._scheduler.request_frame(self._on_frame)

    def _cancel_frame(self):
        if self._scheduler is not None and self._frame_handle is not None:
            self._scheduler.cancel_frame(self._frame_handle)
        self._frame_handle = None

    def _on_frame(self, delta_seconds: float):
        self._frame_handle = None
        self.tick(delta_seconds)
        if self._state is PlaybackState.PLAYING:
            self._request_frame()
