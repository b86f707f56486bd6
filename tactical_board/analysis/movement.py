"""
Movement tracking for playback: per-player speed readout and trails.

Speeds are reported values only (distance between consecutive samples over
elapsed time). Nothing is integrated or simulated.
"""

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Mapping, Optional

from loguru import logger

from tactical_board.core.geometry import distance
from tactical_board.core.models import EntityId, Position


@dataclass(frozen=True)
class TrailPoint:
    position: Position
    time: float


class MovementTracker:
    """
    Follows the position stream produced by playback.

    A backward jump in time (seek or loop wrap) resets speeds and trails,
    since the previous samples no longer precede the new ones.
    """

    def __init__(self, trail_length: float = 3.0):
        """
        Args:
            trail_length: Seconds of history kept per trail (0 disables trails)
        """
        self.trail_length = trail_length
        self._last_time: Optional[float] = None
        self._last_positions: Dict[EntityId, Position] = {}
        self._speeds: Dict[EntityId, float] = {}
        self._trails: Dict[EntityId, Deque[TrailPoint]] = defaultdict(deque)

    def update(self, time: float, positions: Mapping[EntityId, Position]) -> Dict[EntityId, float]:
        """
        Record a new position sample.

        Returns:
            entity_id -> speed in meters per second
        """
        if self._last_time is not None and time < self._last_time:
            logger.debug(f"Movement history reset (time went back to {time:.2f}s)")
            self.reset()

        elapsed = time - self._last_time if self._last_time is not None else 0.0

        speeds = {}
        for entity_id, position in positions.items():
            previous = self._last_positions.get(entity_id)
            if previous is None or elapsed <= 0:
                speeds[entity_id] = 0.0
            else:
                speeds[entity_id] = distance(previous, position) / elapsed

            if self.trail_length > 0:
                trail = self._trails[entity_id]
                trail.append(TrailPoint(position, time))
                while trail and time - trail[0].time > self.trail_length:
                    trail.popleft()

        self._speeds = speeds
        self._last_positions = dict(positions)
        self._last_time = time
        return dict(speeds)

    def speed(self, entity_id: EntityId) -> float:
        return self._speeds.get(entity_id, 0.0)

    def trail(self, entity_id: EntityId) -> List[TrailPoint]:
        return list(self._trails.get(entity_id, ()))

    def reset(self):
        self._last_time = None
        self._last_positions = {}
        self._speeds = {}
        self._trails.clear()
