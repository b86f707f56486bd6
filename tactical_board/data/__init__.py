"""
Tactical Board - Data Module
Movement-data import and plan serialization
"""

from .importer import (
    PositionRecord,
    MovementSample,
    EntityInfo,
    ImportedMovement,
    parse_movement_data,
    load_movement_file,
)
from .serialization import PlanSerializer, EXPORT_FORMAT

__all__ = [
    "PositionRecord",
    "MovementSample",
    "EntityInfo",
    "ImportedMovement",
    "parse_movement_data",
    "load_movement_file",
    "PlanSerializer",
    "EXPORT_FORMAT",
]
