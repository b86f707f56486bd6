"""
Tactical Board - Plan Serialization
Converts timelines, annotations and event markers to plain dicts and JSON files
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from loguru import logger

from tactical_board.core.models import (
    Annotation,
    AnnotationKind,
    AnnotationStyle,
    Entity,
    EventMarker,
    EventType,
    Keyframe,
    Phase,
    Position,
    Role,
    Team,
)
from tactical_board.core.timeline import Timeline
from tactical_board.exceptions import ImportValidationError, InvalidKeyframeError

EXPORT_FORMAT = "tactical_board_plan_v1"


def position_to_list(position: Position) -> List[float]:
    return [position.x, position.y, position.z]


def position_from_list(values: List[float]) -> Position:
    return Position(*[float(v) for v in values])


def positions_to_dict(positions: Dict[int, Position]) -> Dict[str, List[float]]:
    # JSON object keys are strings
    return {str(entity_id): position_to_list(pos) for entity_id, pos in positions.items()}


def positions_from_dict(data: Dict[str, List[float]]) -> Dict[int, Position]:
    return {int(entity_id): position_from_list(values) for entity_id, values in data.items()}


def _require_dict(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ImportValidationError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _require_list(value: Any, what: str) -> List[Any]:
    if not isinstance(value, list):
        raise ImportValidationError(f"{what} must be a list, got {type(value).__name__}")
    return value


class PlanSerializer:
    """
    Dict/JSON conversion for everything a saved plan contains.

    The same shapes are used by the JSON export and by the database
    repository's JSON columns.
    """

    # ------------------------------------------------------------------
    # Keyframes
    # ------------------------------------------------------------------

    @staticmethod
    def keyframe_to_dict(keyframe: Keyframe) -> Dict[str, Any]:
        return {
            "time": keyframe.time,
            "phase": keyframe.phase.value if keyframe.phase else None,
            "positions": positions_to_dict(keyframe.positions),
        }

    @staticmethod
    def keyframe_from_dict(data: Dict[str, Any]) -> Keyframe:
        phase = data.get("phase")
        return Keyframe(
            time=float(data["time"]),
            positions=positions_from_dict(data.get("positions", {})),
            phase=Phase(phase) if phase else None,
        )

    def timeline_to_dict(self, timeline: Timeline) -> Dict[str, Any]:
        return {
            "duration": timeline.duration,
            "keyframes": [self.keyframe_to_dict(k) for k in timeline],
        }

    def timeline_from_dict(self, data: Dict[str, Any]) -> Timeline:
        data = _require_dict(data, "timeline")
        keyframes = [
            self.keyframe_from_dict(_require_dict(k, "keyframe"))
            for k in _require_list(data.get("keyframes", []), "keyframes")
        ]
        timeline = Timeline(keyframes=keyframes)
        duration = float(data.get("duration", 0.0))
        if duration > timeline.duration:
            timeline.set_duration(duration)
        return timeline

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    @staticmethod
    def annotation_to_dict(annotation: Annotation) -> Dict[str, Any]:
        return {
            "id": annotation.id,
            "kind": annotation.kind.value,
            "points": [position_to_list(p) for p in annotation.anchor_points],
            "color": annotation.style.color,
            "width": annotation.style.width,
            "radius": annotation.radius,
        }

    @staticmethod
    def annotation_from_dict(data: Dict[str, Any]) -> Annotation:
        return Annotation(
            id=int(data["id"]),
            kind=AnnotationKind(data["kind"]),
            anchor_points=[position_from_list(p) for p in data.get("points", [])],
            style=AnnotationStyle(
                color=data.get("color", "#ffffff"),
                width=float(data.get("width", 3.0)),
            ),
            radius=data.get("radius"),
        )

    # ------------------------------------------------------------------
    # Event markers
    # ------------------------------------------------------------------

    @staticmethod
    def event_marker_to_dict(marker: EventMarker) -> Dict[str, Any]:
        return {
            "time": marker.time,
            "label": marker.label,
            "description": marker.description,
            "event_type": marker.event_type.value,
            "related_entity_ids": list(marker.related_entity_ids),
        }

    @staticmethod
    def event_marker_from_dict(data: Dict[str, Any]) -> EventMarker:
        return EventMarker(
            time=float(data["time"]),
            label=data["label"],
            description=data.get("description"),
            related_entity_ids=[int(i) for i in data.get("related_entity_ids", [])],
            event_type=EventType(data.get("event_type", EventType.HIGHLIGHT.value)),
        )

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    @staticmethod
    def entity_to_dict(entity: Entity) -> Dict[str, Any]:
        return {
            "id": entity.id,
            "team": entity.team.value,
            "role": entity.role.value,
            "position": position_to_list(entity.position),
            "name": entity.name,
            "number": entity.number,
        }

    @staticmethod
    def entity_from_dict(data: Dict[str, Any]) -> Entity:
        return Entity(
            id=int(data["id"]),
            team=Team(data["team"]),
            role=Role(data["role"]),
            position=position_from_list(data["position"]),
            name=data.get("name", ""),
            number=data.get("number"),
        )

    # ------------------------------------------------------------------
    # Whole plans
    # ------------------------------------------------------------------

    def plan_to_dict(
        self,
        timeline: Timeline,
        annotations: Iterable[Annotation] = (),
        event_markers: Iterable[EventMarker] = (),
        entities: Iterable[Entity] = (),
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return {
            "export_info": {
                "generated_at": datetime.now().isoformat(),
                "version": "1.0",
                "format": EXPORT_FORMAT,
            },
            "metadata": dict(metadata or {}),
            "timeline": self.timeline_to_dict(timeline),
            "annotations": [self.annotation_to_dict(a) for a in annotations],
            "event_markers": [self.event_marker_to_dict(m) for m in event_markers],
            "entities": [self.entity_to_dict(e) for e in entities],
        }

    def plan_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Rebuild plan contents from an exported dict.

        Returns:
            Dict with timeline, annotations, event_markers, entities, metadata

        Raises:
            ImportValidationError: If the dict is not a plan export
        """
        data = _require_dict(data, "plan")
        fmt = _require_dict(data.get("export_info", {}), "export_info").get("format")
        if fmt != EXPORT_FORMAT:
            raise ImportValidationError(f"unsupported plan format '{fmt}'")
        try:
            return {
                "timeline": self.timeline_from_dict(data.get("timeline", {})),
                "annotations": [
                    self.annotation_from_dict(_require_dict(a, "annotation"))
                    for a in _require_list(data.get("annotations", []), "annotations")
                ],
                "event_markers": [
                    self.event_marker_from_dict(_require_dict(m, "event marker"))
                    for m in _require_list(data.get("event_markers", []), "event_markers")
                ],
                "entities": [
                    self.entity_from_dict(_require_dict(e, "entity"))
                    for e in _require_list(data.get("entities", []), "entities")
                ],
                "metadata": _require_dict(data.get("metadata", {}), "metadata"),
            }
        except (KeyError, TypeError, ValueError, AttributeError, InvalidKeyframeError) as e:
            raise ImportValidationError(f"malformed plan ({e})") from e

    def export_json(
        self,
        timeline: Timeline,
        annotations: Iterable[Annotation] = (),
        event_markers: Iterable[EventMarker] = (),
        entities: Iterable[Entity] = (),
        metadata: Optional[Dict[str, Any]] = None,
        output_dir: Optional[Path] = None,
        filename: Optional[str] = None
    ) -> Path:
        """
        Write a plan to a JSON file.

        Args:
            output_dir: Directory for the file (default: settings output dir)
            filename: File name (default: timestamped)

        Returns:
            Path to the output file
        """
        if output_dir is None:
            from config import settings
            output_dir = settings.get_output_dir()
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = output_dir / (filename or f"plan_{timestamp}.json")

        export_data = self.plan_to_dict(timeline, annotations, event_markers, entities, metadata)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(export_data, f, indent=2, default=str)

        logger.info(f"Exported plan to: {output_path}")
        return output_path

    def import_json(self, path: Union[str, Path]) -> Dict[str, Any]:
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ImportValidationError(f"not valid JSON ({e.msg})", source=path.name) from e
        if not isinstance(data, dict):
            raise ImportValidationError("expected a plan object", source=path.name)

        plan = self.plan_from_dict(data)
        logger.info(f"Imported plan from: {path}")
        return plan
