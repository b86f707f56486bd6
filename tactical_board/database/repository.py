"""
Tactical Board - Plan Repository
Saves and loads tactical plans through the ORM models
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from tactical_board.core.models import Annotation, EventMarker
from tactical_board.core.timeline import Timeline
from tactical_board.data.serialization import PlanSerializer
from tactical_board.database.models import (
    Plan,
    PlanAnnotation,
    PlanEventMarker,
    PlanKeyframe,
    get_db_session,
    get_session_factory,
)
from tactical_board.exceptions import PlanNotFoundError, PlanSaveError


@dataclass
class LoadedPlan:
    """Everything restored from a saved plan"""
    id: int
    name: Optional[str]
    timeline: Timeline
    annotations: List[Annotation] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    event_markers: List[EventMarker] = field(default_factory=list)


@dataclass
class PlanSummary:
    id: int
    name: Optional[str]
    duration: float
    keyframe_count: int
    created_at: Any = None


class PlanRepository:
    """
    Persistence for tactical plans.

    Keyframe positions are stored as JSON with string entity ids and are
    converted back to integer ids on load.
    """

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()
        self._serializer = PlanSerializer()

    def save(
        self,
        timeline: Timeline,
        annotations: Iterable[Annotation] = (),
        metadata: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
        event_markers: Iterable[EventMarker] = ()
    ) -> int:
        """
        Persist a plan.

        Returns:
            ID of the new plan

        Raises:
            PlanSaveError: If the database write fails
        """
        metadata = dict(metadata or {})
        name = name or metadata.get("name") or "Untitled plan"
        to_dict = self._serializer

        plan = Plan(name=name, duration=timeline.duration, plan_metadata=metadata)
        for keyframe in timeline:
            data = to_dict.keyframe_to_dict(keyframe)
            plan.keyframes.append(
                PlanKeyframe(time=data["time"], phase=data["phase"], positions=data["positions"])
            )
        for sequence, annotation in enumerate(annotations):
            data = to_dict.annotation_to_dict(annotation)
            plan.annotations.append(
                PlanAnnotation(
                    sequence=sequence,
                    annotation_id=data["id"],
                    kind=data["kind"],
                    points=data["points"],
                    color=data["color"],
                    width=data["width"],
                    radius=data["radius"],
                )
            )
        for marker in event_markers:
            data = to_dict.event_marker_to_dict(marker)
            plan.event_markers.append(PlanEventMarker(**data))

        try:
            with get_db_session(self._session_factory) as session:
                session.add(plan)
                session.flush()
                plan_id = plan.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to save plan '{name}': {e}")
            raise PlanSaveError(name, str(e)) from e

        logger.info(f"Saved plan '{name}' (id={plan_id}, {len(timeline)} keyframes)")
        return plan_id

    def load(self, plan_id: int) -> LoadedPlan:
        """
        Restore a saved plan.

        Raises:
            PlanNotFoundError: If no plan has this ID
        """
        serializer = self._serializer
        with get_db_session(self._session_factory) as session:
            plan = session.get(Plan, plan_id)
            if plan is None:
                raise PlanNotFoundError(plan_id)

            keyframes = [
                serializer.keyframe_from_dict(
                    {"time": k.time, "phase": k.phase, "positions": k.positions}
                )
                for k in plan.keyframes
            ]
            timeline = Timeline(keyframes=keyframes)
            if plan.duration and plan.duration > timeline.duration:
                timeline.set_duration(plan.duration)

            annotations = [
                serializer.annotation_from_dict({
                    "id": a.annotation_id,
                    "kind": a.kind,
                    "points": a.points,
                    "color": a.color,
                    "width": a.width,
                    "radius": a.radius,
                })
                for a in plan.annotations
            ]
            event_markers = [
                serializer.event_marker_from_dict({
                    "time": m.time,
                    "label": m.label,
                    "description": m.description,
                    "event_type": m.event_type,
                    "related_entity_ids": m.related_entity_ids or [],
                })
                for m in plan.event_markers
            ]
            loaded = LoadedPlan(
                id=plan.id,
                name=plan.name,
                timeline=timeline,
                annotations=annotations,
                metadata=dict(plan.plan_metadata or {}),
                event_markers=event_markers,
            )

        logger.debug(f"Loaded plan {plan_id} ({len(loaded.timeline)} keyframes)")
        return loaded

    def list_plans(self) -> List[PlanSummary]:
        """Saved plans, newest first"""
        with get_db_session(self._session_factory) as session:
            plans = session.query(Plan).order_by(Plan.created_at.desc(), Plan.id.desc()).all()
            return [
                PlanSummary(
                    id=p.id,
                    name=p.name,
                    duration=p.duration or 0.0,
                    keyframe_count=len(p.keyframes),
                    created_at=p.created_at,
                )
                for p in plans
            ]

    def delete(self, plan_id: int):
        """
        Raises:
            PlanNotFoundError: If no plan has this ID
        """
        with get_db_session(self._session_factory) as session:
            plan = session.get(Plan, plan_id)
            if plan is None:
                raise PlanNotFoundError(plan_id)
            session.delete(plan)
        logger.info(f"Deleted plan {plan_id}")
