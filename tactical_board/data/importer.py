"""
Tactical Board - Movement Data Import
Validates recorded movement JSON and converts it into keyframes.

Expected shape:

    [
        {"timestamp": 0, "positions": [{"id": 1, "x": -45, "y": 0}, ...]},
        {"timestamp": 5, "positions": [...]},
        ...
    ]

Every sample is validated before any keyframe is built.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from tactical_board.core.models import EntityId, Keyframe, Phase, Position, Role, Team
from tactical_board.exceptions import ImportValidationError


class PositionRecord(BaseModel):
    """One entity position inside a movement sample"""
    id: int
    x: float
    y: float
    z: float = 0.0
    team: Optional[Team] = None
    role: Optional[Role] = None
    name: Optional[str] = None
    number: Optional[int] = None


class MovementSample(BaseModel):
    """One timestamped element of a movement file"""
    timestamp: float = Field(ge=0)
    positions: List[PositionRecord]
    phase: Optional[Phase] = None


@dataclass
class EntityInfo:
    """Entity metadata carried by the import (first value seen wins)"""
    id: EntityId
    team: Optional[Team] = None
    role: Optional[Role] = None
    name: Optional[str] = None
    number: Optional[int] = None


@dataclass
class ImportedMovement:
    keyframes: List[Keyframe] = field(default_factory=list)
    entities: Dict[EntityId, EntityInfo] = field(default_factory=dict)

    @property
    def duration(self) -> float:
        return max((k.time for k in self.keyframes), default=0.0)


def _first_error(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg', 'invalid value')}" if location else error.get("msg", "")


def parse_movement_data(data: Any, source: Optional[str] = None) -> ImportedMovement:
    """
    Validate and convert decoded movement data.

    Args:
        data: Decoded JSON (list of samples)
        source: File name or label used in error messages

    Returns:
        ImportedMovement with keyframes in file order

    Raises:
        ImportValidationError: If the data is not a list, the first element
            lacks a timestamp, or any element is malformed
    """
    if not isinstance(data, list):
        raise ImportValidationError("expected a list of samples", source=source)
    if not data:
        raise ImportValidationError("no samples", source=source)
    if not isinstance(data[0], dict) or "timestamp" not in data[0]:
        raise ImportValidationError("first sample has no timestamp", source=source, index=0)

    samples = []
    for index, raw in enumerate(data):
        try:
            samples.append(MovementSample.model_validate(raw))
        except PydanticValidationError as e:
            logger.warning(f"Rejected movement data at sample {index}: {_first_error(e)}")
            raise ImportValidationError(_first_error(e), source=source, index=index) from e

    imported = ImportedMovement()
    for sample in samples:
        positions = {}
        for record in sample.positions:
            positions[record.id] = Position(record.x, record.y, record.z)
            info = imported.entities.setdefault(record.id, EntityInfo(id=record.id))
            for attr in ("team", "role", "name", "number"):
                value = getattr(record, attr)
                if getattr(info, attr) is None and value is not None:
                    setattr(info, attr, value)
        imported.keyframes.append(
            Keyframe(time=sample.timestamp, positions=positions, phase=sample.phase)
        )

    logger.debug(
        f"Parsed {len(imported.keyframes)} samples for {len(imported.entities)} entities"
    )
    return imported


def load_movement_file(path: Union[str, Path]) -> ImportedMovement:
    """
    Read and validate a movement JSON file.

    Raises:
        ImportValidationError: If the file is not valid JSON or fails validation
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ImportValidationError(f"not valid JSON ({e.msg})", source=path.name) from e

    return parse_movement_data(data, source=path.name)
