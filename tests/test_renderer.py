"""
Tests for the OpenCV pitch renderer.
"""

import numpy as np
import pytest

from tactical_board.analysis.formations import create_team
from tactical_board.analysis.spatial import compute_spatial_metrics
from tactical_board.core.models import Annotation, AnnotationKind, AnnotationStyle, Position, Team
from tactical_board.exceptions import InvalidConfigError
from tactical_board.render.pitch_renderer import (
    PITCH_GREEN,
    TEAM_COLORS,
    PitchRenderer,
    hex_to_bgr,
)


@pytest.fixture
def renderer():
    return PitchRenderer(pixels_per_meter=4.0, margin=10)


class TestPitchRenderer:

    def test_image_size(self, renderer):
        img = renderer.render()
        assert img.shape == (68 * 4 + 20, 105 * 4 + 20, 3)
        assert img.dtype == np.uint8

    def test_invalid_scale(self):
        with pytest.raises(InvalidConfigError):
            PitchRenderer(pixels_per_meter=0)

    def test_to_pixel_centre_and_corners(self, renderer):
        assert renderer.to_pixel(Position(0, 0)) == (10 + 210, 10 + 136)
        assert renderer.to_pixel(Position(-52.5, 34)) == (10, 10)

    def test_empty_pitch_is_green(self, renderer):
        img = renderer.render()
        # Between the centre circle and the penalty box
        x, y = renderer.to_pixel(Position(-20, 25))
        assert tuple(img[y, x]) == PITCH_GREEN

    def test_marker_uses_side_table(self, renderer):
        players = create_team(Team.HOME, "4-4-2")
        renderer.register_entities(players)
        renderer.update_positions({1: Position(-20, 25)})
        img = renderer.render()
        x, y = renderer.to_pixel(Position(-20, 25))
        # Right of the label text, inside the filled marker
        assert tuple(img[y - 6, x]) == TEAM_COLORS[Team.HOME]
        assert renderer.marker_style(1).label == "1"

    def test_annotations_drawn(self, renderer):
        annotation = Annotation(
            1, AnnotationKind.LINE, [Position(-30, 20), Position(-10, 20)],
            AnnotationStyle("#ff0000", 3.0),
        )
        renderer.update_annotations([annotation])
        img = renderer.render()
        x, y = renderer.to_pixel(Position(-20, 20))
        assert tuple(img[y, x]) == (0, 0, 255)

    def test_overlays_accept_metrics(self, renderer):
        players = create_team(Team.HOME, "4-4-2") + create_team(Team.AWAY, "4-3-3")
        renderer.update_positions({p.id: p.position for p in players})
        renderer.update_overlays(compute_spatial_metrics(players))
        img = renderer.render()
        assert img.shape[2] == 3

    def test_save(self, renderer, tmp_path):
        path = renderer.save(tmp_path / "board.png")
        assert path.exists()


class TestHexToBgr:

    def test_conversion(self):
        assert hex_to_bgr("#ff0000") == (0, 0, 255)
        assert hex_to_bgr("00ff00") == (0, 255, 0)

    def test_invalid_falls_back_to_white(self):
        assert hex_to_bgr("red") == (255, 255, 255)
