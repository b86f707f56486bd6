"""
Tests for movement data import and plan JSON serialization.
"""

import json

import pytest

from tactical_board.core.models import (
    Annotation,
    AnnotationKind,
    AnnotationStyle,
    EventMarker,
    EventType,
    Phase,
    Position,
    Role,
    Team,
)
from tactical_board.core.timeline import Timeline
from tactical_board.data.importer import load_movement_file, parse_movement_data
from tactical_board.data.serialization import PlanSerializer
from tactical_board.exceptions import ImportValidationError


@pytest.fixture
def movement_data():
    """Sample movement: two players over three samples"""
    return [
        {"timestamp": 0, "positions": [
            {"id": 1, "x": -45, "y": 0, "team": "home", "role": "goalkeeper"},
            {"id": 2, "x": -30, "y": -10, "team": "home", "role": "defender", "number": 4},
        ]},
        {"timestamp": 5, "positions": [
            {"id": 1, "x": -44, "y": 0},
            {"id": 2, "x": -20, "y": -8},
        ]},
        {"timestamp": 10, "phase": "attack", "positions": [
            {"id": 1, "x": -40, "y": 1},
            {"id": 2, "x": -10, "y": -5, "z": 0.5},
        ]},
    ]


class TestParseMovementData:
    """Test validation and conversion."""

    def test_valid_data(self, movement_data):
        imported = parse_movement_data(movement_data)
        assert [k.time for k in imported.keyframes] == [0.0, 5.0, 10.0]
        assert imported.keyframes[1].positions[2] == Position(-20.0, -8.0)
        assert imported.keyframes[2].positions[2].z == 0.5
        assert imported.keyframes[2].phase is Phase.ATTACK
        assert imported.duration == 10.0

    def test_entity_metadata_collected(self, movement_data):
        imported = parse_movement_data(movement_data)
        info = imported.entities[2]
        assert info.team is Team.HOME
        assert info.role is Role.DEFENDER
        assert info.number == 4

    def test_first_element_without_timestamp(self):
        with pytest.raises(ImportValidationError) as exc_info:
            parse_movement_data([{"positions": []}])
        assert "timestamp" in str(exc_info.value)

    def test_not_a_list(self):
        with pytest.raises(ImportValidationError):
            parse_movement_data({"timestamp": 0})

    def test_empty_list(self):
        with pytest.raises(ImportValidationError):
            parse_movement_data([])

    def test_malformed_later_element_reports_index(self, movement_data):
        movement_data[2]["positions"][0]["x"] = "left wing"
        with pytest.raises(ImportValidationError) as exc_info:
            parse_movement_data(movement_data, source="match.json")
        assert exc_info.value.context["index"] == 2
        assert exc_info.value.context["source"] == "match.json"

    def test_negative_timestamp_rejected(self):
        with pytest.raises(ImportValidationError):
            parse_movement_data([{"timestamp": -1, "positions": []}])


class TestLoadMovementFile:

    def test_load_from_file(self, tmp_path, movement_data):
        path = tmp_path / "movement.json"
        path.write_text(json.dumps(movement_data))
        imported = load_movement_file(path)
        assert len(imported.keyframes) == 3

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{")
        with pytest.raises(ImportValidationError) as exc_info:
            load_movement_file(path)
        assert exc_info.value.context["source"] == "broken.json"


class TestPlanSerializer:
    """Test dict and JSON conversion."""

    def test_timeline_round_trip(self, scenario_timeline):
        serializer = PlanSerializer()
        restored = serializer.timeline_from_dict(serializer.timeline_to_dict(scenario_timeline))
        assert restored.keyframes == scenario_timeline.keyframes
        assert restored.duration == scenario_timeline.duration

    def test_positions_keys_are_strings(self, scenario_timeline):
        data = PlanSerializer().timeline_to_dict(scenario_timeline)
        assert list(data["keyframes"][0]["positions"]) == ["1"]

    def test_export_and_import_json(self, tmp_path, scenario_timeline):
        serializer = PlanSerializer()
        annotation = Annotation(
            id=1,
            kind=AnnotationKind.CIRCLE,
            anchor_points=[Position(0, 0)],
            style=AnnotationStyle("#ffff00", 2.0),
            radius=9.15,
        )
        marker = EventMarker(5.0, "Press", event_type=EventType.TACTICAL_CHANGE)

        path = serializer.export_json(
            scenario_timeline, [annotation], [marker],
            metadata={"home_formation": "4-4-2"},
            output_dir=tmp_path, filename="plan.json",
        )
        plan = serializer.import_json(path)

        assert plan["timeline"].keyframes == scenario_timeline.keyframes
        assert plan["annotations"] == [annotation]
        assert plan["event_markers"] == [marker]
        assert plan["metadata"] == {"home_formation": "4-4-2"}

    def test_rejects_other_formats(self, tmp_path):
        path = tmp_path / "other.json"
        path.write_text(json.dumps({"export_info": {"format": "other_tool_v1"}}))
        with pytest.raises(ImportValidationError):
            PlanSerializer().import_json(path)

    def test_duration_preserved_past_last_keyframe(self):
        timeline = Timeline(duration=30.0)
        timeline.insert_keyframe(0.0, {1: Position(0, 0)})
        serializer = PlanSerializer()
        restored = serializer.timeline_from_dict(serializer.timeline_to_dict(timeline))
        assert restored.duration == 30.0


class TestRequiredFields:

    def test_missing_positions_rejected(self):
        with pytest.raises(ImportValidationError) as exc_info:
            parse_movement_data([{"timestamp": 0}])
        assert "positions" in str(exc_info.value)


def _plan_export(**overrides):
    plan = {
        "export_info": {"format": "tactical_board_plan_v1"},
        "timeline": {"duration": 10.0, "keyframes": [
            {"time": 0.0, "positions": {"1": [0.0, 0.0, 0.0]}},
        ]},
        "annotations": [],
        "event_markers": [],
        "entities": [],
        "metadata": {},
    }
    plan.update(overrides)
    return plan


class TestMalformedPlanFiles:
    """Broken plan exports are rejected as ImportValidationError."""

    @pytest.mark.parametrize("plan", [
        ["not", "a", "plan"],
        _plan_export(export_info="v1"),
        _plan_export(timeline=[]),
        _plan_export(timeline={"keyframes": [5]}),
        _plan_export(timeline={"keyframes": {"time": 0}}),
        _plan_export(timeline={"keyframes": [{"time": -1, "positions": {}}]}),
        _plan_export(timeline={"keyframes": [{"time": 0, "positions": [1, 2]}]}),
        _plan_export(annotations=["arrow"]),
        _plan_export(event_markers=[{"time": 1.0}]),
        _plan_export(entities=[3]),
        _plan_export(metadata="none"),
    ], ids=[
        "not-an-object",
        "export-info-string",
        "timeline-list",
        "keyframe-int",
        "keyframes-object",
        "negative-time",
        "positions-list",
        "annotation-string",
        "marker-without-label",
        "entity-int",
        "metadata-string",
    ])
    def test_rejected(self, tmp_path, plan):
        path = tmp_path / "broken_plan.json"
        path.write_text(json.dumps(plan))
        with pytest.raises(ImportValidationError):
            PlanSerializer().import_json(path)

    def test_well_formed_baseline_loads(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text(json.dumps(_plan_export()))
        plan = PlanSerializer().import_json(path)
        assert plan["timeline"].times == [0.0]

    def test_board_import_rejects_and_keeps_state(self, board, tmp_path):
        path = tmp_path / "broken_plan.json"
        path.write_text(json.dumps(_plan_export(timeline={"keyframes": [5]})))
        before = board.timeline.keyframes
        with pytest.raises(ImportValidationError):
            board.import_plan(path)
        assert board.timeline.keyframes == before
