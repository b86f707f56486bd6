"""
Tactical Board - Keyframe Timeline
Ordered keyframes and position interpolation for scrubbing and playback
"""

from bisect import bisect_left, bisect_right
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from loguru import logger

from tactical_board.core.geometry import lerp_position
from tactical_board.core.models import EntityId, Keyframe, Phase, Position
from tactical_board.exceptions import InvalidDurationError, InvalidKeyframeError


def interpolate_between(prev: Keyframe, next_: Keyframe, time: float) -> Dict[EntityId, Position]:
    """
    Blend two keyframes at a time inside [prev.time, next_.time].

    Entities present in both keyframes are interpolated linearly. Entities
    present in only one keep that keyframe's position (no extrapolation).
    Identical timestamps snap to the later keyframe.
    """
    span = next_.time - prev.time
    t = (time - prev.time) / span if span != 0 else 1.0

    result: Dict[EntityId, Position] = {}
    for entity_id, prev_pos in prev.positions.items():
        next_pos = next_.positions.get(entity_id)
        if next_pos is None:
            result[entity_id] = prev_pos
        else:
            result[entity_id] = lerp_position(prev_pos, next_pos, t)

    for entity_id, next_pos in next_.positions.items():
        if entity_id not in prev.positions:
            result[entity_id] = next_pos

    return result


class Timeline:
    """
    Keyframes for one playback session, kept in ascending time order with
    unique timestamps.
    """

    def __init__(self, duration: float = 0.0, keyframes: Optional[Iterable[Keyframe]] = None):
        self._keyframes: List[Keyframe] = []
        self._times: List[float] = []
        self._duration = max(0.0, duration)

        if keyframes is not None:
            self.replace_keyframes(keyframes)

    def __len__(self) -> int:
        return len(self._keyframes)

    def __iter__(self) -> Iterator[Keyframe]:
        return iter(self._keyframes)

    @property
    def is_empty(self) -> bool:
        return not self._keyframes

    @property
    def keyframes(self) -> List[Keyframe]:
        return list(self._keyframes)

    @property
    def times(self) -> List[float]:
        return list(self._times)

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def first(self) -> Optional[Keyframe]:
        return self._keyframes[0] if self._keyframes else None

    @property
    def last(self) -> Optional[Keyframe]:
        return self._keyframes[-1] if self._keyframes else None

    def set_duration(self, duration: float):
        """Set playback length; it may not cut off recorded keyframes."""
        minimum = self._times[-1] if self._times else 0.0
        if duration < minimum:
            raise InvalidDurationError(duration, minimum)
        self._duration = duration

    def insert_keyframe(
        self,
        time: float,
        positions: Mapping[EntityId, Position],
        phase: Optional[Phase] = None
    ) -> Keyframe:
        """
        Insert a keyframe, replacing any existing keyframe at the same time.

        Args:
            time: Keyframe time in seconds (>= 0)
            positions: entity_id -> Position snapshot
            phase: Optional planning phase tag

        Returns:
            The stored keyframe
        """
        if time < 0:
            raise InvalidKeyframeError(time, "time must be >= 0")

        keyframe = Keyframe(time=time, positions=dict(positions), phase=phase)
        index = bisect_left(self._times, time)

        if index < len(self._times) and self._times[index] == time:
            self._keyframes[index] = keyframe
            logger.debug(f"Replaced keyframe at {time:.2f}s")
        else:
            self._keyframes.insert(index, keyframe)
            self._times.insert(index, time)
            logger.debug(f"Inserted keyframe at {time:.2f}s ({len(self._keyframes)} total)")

        if time > self._duration:
            self._duration = time

        return keyframe

    def remove_keyframe(self, time: float) -> bool:
        """Remove the keyframe at exactly this time. Returns True if removed."""
        index = bisect_left(self._times, time)
        if index < len(self._times) and self._times[index] == time:
            del self._keyframes[index]
            del self._times[index]
            return True
        return False

    def keyframe_at(self, time: float) -> Optional[Keyframe]:
        index = bisect_left(self._times, time)
        if index < len(self._times) and self._times[index] == time:
            return self._keyframes[index]
        return None

    def replace_keyframes(self, keyframes: Iterable[Keyframe]):
        """Bulk load. Later keyframes win on duplicate times."""
        by_time: Dict[float, Keyframe] = {}
        for keyframe in keyframes:
            if keyframe.time < 0:
                raise InvalidKeyframeError(keyframe.time, "time must be >= 0")
            by_time[keyframe.time] = Keyframe(
                time=keyframe.time,
                positions=dict(keyframe.positions),
                phase=keyframe.phase
            )

        ordered = sorted(by_time.values(), key=lambda k: k.time)
        self._keyframes = ordered
        self._times = [k.time for k in ordered]
        if self._times and self._times[-1] > self._duration:
            self._duration = self._times[-1]

    def clear(self):
        self._keyframes = []
        self._times = []
        self._duration = 0.0

    def interpolate(self, time: float) -> Optional[Dict[EntityId, Position]]:
        """
        Positions of every keyed entity at the given time.

        Times before the first or after the last keyframe are clamped.

        Returns:
            entity_id -> Position, or None when the timeline has no keyframes
        """
        if not self._keyframes:
            return None

        first = self._keyframes[0]
        last = self._keyframes[-1]
        if time <= first.time:
            return dict(first.positions)
        if time >= last.time:
            return dict(last.positions)

        # first.time < time < last.time, so 1 <= index <= len - 1
        index = bisect_right(self._times, time)
        return interpolate_between(self._keyframes[index - 1], self._keyframes[index], time)
