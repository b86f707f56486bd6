"""
Tests for the formation catalog.
"""

import pytest

from tactical_board.analysis.formations import (
    AWAY_ID_OFFSET,
    FORMATIONS,
    available_formations,
    create_team,
    get_formation,
    initial_positions,
)
from tactical_board.core.models import Role, Team
from tactical_board.exceptions import FormationNotFoundError


class TestCatalog:

    def test_expected_formations(self):
        for name in ["4-4-2", "4-3-3", "3-5-2", "4-5-1", "4-2-3-1"]:
            assert name in available_formations()

    @pytest.mark.parametrize("name", list(FORMATIONS))
    def test_eleven_players_one_goalkeeper(self, name):
        slots = get_formation(name)
        assert len(slots) == 11
        assert sum(1 for s in slots if s.role is Role.GOALKEEPER) == 1

    def test_unknown_formation(self):
        with pytest.raises(FormationNotFoundError) as exc_info:
            get_formation("2-3-5")
        assert "formation=2-3-5" in str(exc_info.value)


class TestCreateTeam:

    def test_home_ids_and_orientation(self):
        players = create_team(Team.HOME, "4-4-2")
        assert [p.id for p in players] == list(range(1, 12))
        goalkeeper = players[0]
        assert goalkeeper.is_goalkeeper
        assert goalkeeper.position.x == -45.0

    def test_away_is_mirrored(self):
        players = create_team(Team.AWAY, "4-4-2")
        assert players[0].id == AWAY_ID_OFFSET + 1
        assert players[0].position.x == 45.0
        assert all(p.team is Team.AWAY for p in players)

    def test_initial_positions(self):
        players = create_team(Team.HOME, "4-3-3")
        positions = initial_positions(players)
        assert positions[1] == players[0].position
        assert len(positions) == 11
