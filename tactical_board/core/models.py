"""
Tactical Board - Core Data Model
Entities, keyframes, annotations and event markers
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

EntityId = int


class Team(str, Enum):
    """Team side. Home defends the negative-x goal, away the positive-x goal."""
    HOME = "home"
    AWAY = "away"

    @property
    def own_goal_direction(self) -> int:
        return -1 if self is Team.HOME else 1

    @property
    def opponent(self) -> "Team":
        return Team.AWAY if self is Team.HOME else Team.HOME


class Role(str, Enum):
    """Player role used by analytics"""
    GOALKEEPER = "goalkeeper"
    DEFENDER = "defender"
    MIDFIELDER = "midfielder"
    FORWARD = "forward"


class Phase(str, Enum):
    """Planning phase tag on a keyframe (informational only)"""
    DEFENSE = "defense"
    TRANSITION = "transition"
    ATTACK = "attack"


class AnnotationKind(str, Enum):
    LINE = "line"
    ARROW = "arrow"
    RECT = "rect"
    CIRCLE = "circle"
    FREEHAND = "freehand"


class EventType(str, Enum):
    """Timeline event marker types"""
    GOAL = "goal"
    FOUL = "foul"
    SUBSTITUTION = "substitution"
    TACTICAL_CHANGE = "tactical_change"
    HIGHLIGHT = "highlight"


@dataclass(frozen=True)
class Position:
    """Pitch coordinate in meters. z is display height only."""
    x: float
    y: float
    z: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass
class Entity:
    """A tracked player on the pitch. Carries no renderer state."""
    id: EntityId
    team: Team
    role: Role
    position: Position
    name: str = ""
    number: Optional[int] = None

    @property
    def is_goalkeeper(self) -> bool:
        return self.role is Role.GOALKEEPER

    def moved_to(self, position: Position) -> "Entity":
        return replace(self, position=position)


@dataclass
class Keyframe:
    """Timestamped snapshot of entity positions"""
    time: float
    positions: Dict[EntityId, Position] = field(default_factory=dict)
    phase: Optional[Phase] = None


@dataclass(frozen=True)
class AnnotationStyle:
    color: str = "#ffffff"
    width: float = 3.0


@dataclass
class Annotation:
    """
    User-drawn shape anchored to pitch coordinates.

    Anchor points by kind:
        line / arrow / rect: [start, end] (rect uses opposite corners)
        circle: [center], with radius set
        freehand: the recorded pointer samples
    """
    id: int
    kind: AnnotationKind
    anchor_points: List[Position]
    style: AnnotationStyle = field(default_factory=AnnotationStyle)
    radius: Optional[float] = None

    def path_points(self, samples_per_point: int = 2) -> List[Position]:
        """Points to draw. Freehand paths are smoothed through the samples."""
        if self.kind is AnnotationKind.FREEHAND:
            from tactical_board.core.geometry import catmull_rom_path
            return catmull_rom_path(
                self.anchor_points, len(self.anchor_points) * samples_per_point
            )
        return list(self.anchor_points)


@dataclass
class EventMarker:
    """Seek target on the playback timeline; never changes keyframe data"""
    time: float
    label: str
    description: Optional[str] = None
    related_entity_ids: List[EntityId] = field(default_factory=list)
    event_type: EventType = EventType.HIGHLIGHT
