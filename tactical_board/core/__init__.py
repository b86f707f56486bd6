"""
Tactical Board - Core Module
"""

from tactical_board.core.models import (
    EntityId,
    Team,
    Role,
    Phase,
    Position,
    Entity,
    Keyframe,
    Annotation,
    AnnotationKind,
    AnnotationStyle,
    EventMarker,
    EventType,
)
from tactical_board.core.timeline import Timeline, interpolate_between
from tactical_board.core.playback import (
    PlaybackClock,
    PlaybackState,
    FrameScheduler,
    ManualFrameScheduler,
)

__all__ = [
    "EntityId",
    "Team",
    "Role",
    "Phase",
    "Position",
    "Entity",
    "Keyframe",
    "Annotation",
    "AnnotationKind",
    "AnnotationStyle",
    "EventMarker",
    "EventType",
    "Timeline",
    "interpolate_between",
    "PlaybackClock",
    "PlaybackState",
    "FrameScheduler",
    "ManualFrameScheduler",
]
