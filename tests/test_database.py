"""
Tests for plan persistence.

Uses in-memory SQLite to avoid requiring a database server for testing.
"""

import pytest

from tactical_board.core.models import (
    Annotation,
    AnnotationKind,
    AnnotationStyle,
    EventMarker,
    EventType,
    Phase,
    Position,
)
from tactical_board.core.timeline import Timeline
from tactical_board.database.models import (
    DatabaseSession,
    Plan,
    PlanAnnotation,
    PlanEventMarker,
    PlanKeyframe,
    get_db_session,
)
from tactical_board.exceptions import PlanNotFoundError


class FailingCommitSession:
    """Session double whose commit (and optionally rollback) raises"""

    def __init__(self, fail_rollback=False):
        self.fail_rollback = fail_rollback
        self.closed = False

    def commit(self):
        raise RuntimeError("commit failed")

    def rollback(self):
        if self.fail_rollback:
            raise RuntimeError("rollback failed")

    def close(self):
        self.closed = True


@pytest.fixture
def annotations():
    return [
        Annotation(1, AnnotationKind.ARROW, [Position(0, 0), Position(10, 5)],
                   AnnotationStyle("#ff0000", 3.0)),
        Annotation(2, AnnotationKind.CIRCLE, [Position(-20, 0)],
                   AnnotationStyle("#ffff00", 3.0), radius=6.0),
        Annotation(3, AnnotationKind.FREEHAND, [Position(0, 0), Position(1, 2), Position(3, 3)],
                   AnnotationStyle("#00ff00", 2.0)),
    ]


@pytest.fixture
def markers():
    return [
        EventMarker(2.5, "Overlap", "Full-back overlaps", [2, 7], EventType.HIGHLIGHT),
        EventMarker(10.0, "Goal", event_type=EventType.GOAL),
    ]


class TestPlanModels:
    """Test ORM tables directly."""

    def test_cascade_delete(self, session_factory):
        with DatabaseSession(session_factory) as session:
            plan = Plan(name="Cascade", duration=5.0, plan_metadata={})
            plan.keyframes.append(PlanKeyframe(time=0.0, positions={"1": [0, 0, 0]}))
            plan.annotations.append(PlanAnnotation(annotation_id=1, kind="line", points=[]))
            plan.event_markers.append(PlanEventMarker(time=1.0, label="Kick-off"))
            session.add(plan)

        with DatabaseSession(session_factory) as session:
            session.delete(session.query(Plan).one())

        with DatabaseSession(session_factory) as session:
            assert session.query(PlanKeyframe).count() == 0
            assert session.query(PlanAnnotation).count() == 0
            assert session.query(PlanEventMarker).count() == 0

    def test_session_rolls_back_on_error(self, session_factory):
        with pytest.raises(RuntimeError):
            with DatabaseSession(session_factory) as session:
                session.add(Plan(name="Rolled back"))
                raise RuntimeError("boom")

        with DatabaseSession(session_factory) as session:
            assert session.query(Plan).count() == 0

    def test_session_closed_when_commit_fails(self):
        session = FailingCommitSession()
        with pytest.raises(RuntimeError):
            with get_db_session(lambda: session):
                pass
        assert session.closed

    def test_session_closed_when_rollback_fails(self):
        session = FailingCommitSession(fail_rollback=True)
        with pytest.raises(RuntimeError):
            with get_db_session(lambda: session):
                raise ValueError("write failed")
        assert session.closed

    def test_repr(self):
        assert "Plan(" in repr(Plan(id=1, name="x"))


class TestPlanRepository:
    """Test save/load round trips."""

    def test_round_trip(self, repository, scenario_timeline, annotations, markers):
        plan_id = repository.save(
            scenario_timeline, annotations, {"home_formation": "4-4-2"},
            name="Pressing plan", event_markers=markers,
        )
        loaded = repository.load(plan_id)

        assert loaded.name == "Pressing plan"
        assert loaded.timeline.keyframes == scenario_timeline.keyframes
        assert loaded.annotations == annotations
        assert loaded.event_markers == markers
        assert loaded.metadata == {"home_formation": "4-4-2"}

    def test_entity_ids_restored_as_int(self, repository, scenario_timeline):
        plan_id = repository.save(scenario_timeline)
        loaded = repository.load(plan_id)
        assert set(loaded.timeline.first.positions) == {1}

    def test_phase_and_duration(self, repository):
        timeline = Timeline(duration=20.0)
        timeline.insert_keyframe(0.0, {1: Position(0, 0)}, Phase.DEFENSE)
        timeline.insert_keyframe(8.0, {1: Position(5, 0)}, Phase.ATTACK)
        loaded = repository.load(repository.save(timeline))
        assert [k.phase for k in loaded.timeline] == [Phase.DEFENSE, Phase.ATTACK]
        assert loaded.timeline.duration == 20.0

    def test_default_name(self, repository, scenario_timeline):
        loaded = repository.load(repository.save(scenario_timeline))
        assert loaded.name == "Untitled plan"

    def test_load_unknown_id(self, repository):
        with pytest.raises(PlanNotFoundError) as exc_info:
            repository.load(999)
        assert exc_info.value.context["plan_id"] == 999

    def test_list_and_delete(self, repository, scenario_timeline):
        first = repository.save(scenario_timeline, name="First")
        second = repository.save(scenario_timeline, name="Second")

        summaries = repository.list_plans()
        assert {s.id for s in summaries} == {first, second}
        assert all(s.keyframe_count == 4 for s in summaries)

        repository.delete(first)
        assert [s.id for s in repository.list_plans()] == [second]
        with pytest.raises(PlanNotFoundError):
            repository.delete(first)

    def test_empty_timeline(self, repository):
        loaded = repository.load(repository.save(Timeline()))
        assert loaded.timeline.is_empty
        assert loaded.timeline.interpolate(1.0) is None
