"""
Formation Catalog
Named starting layouts used to populate the first keyframe of a board
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from loguru import logger

from tactical_board.core.models import Entity, EntityId, Position, Role, Team
from tactical_board.exceptions import FormationNotFoundError

# Away ids are offset so both squads share one id space
AWAY_ID_OFFSET = 100


@dataclass(frozen=True)
class FormationSlot:
    """One player position in a formation template (home orientation, meters)."""
    role: Role
    x: float
    y: float


def _slots(rows: List[Tuple[str, float, float]]) -> List[FormationSlot]:
    return [FormationSlot(Role(role), float(x), float(y)) for role, x, y in rows]


# Home team attacks toward +x; goalkeeper first, then defense to attack
FORMATIONS: Dict[str, List[FormationSlot]] = {
    "4-4-2": _slots([
        ("goalkeeper", -45, 0),
        ("defender", -35, -20), ("defender", -35, -7), ("defender", -35, 7), ("defender", -35, 20),
        ("midfielder", -15, -20), ("midfielder", -15, -7), ("midfielder", -15, 7), ("midfielder", -15, 20),
        ("forward", 5, -10), ("forward", 5, 10),
    ]),
    "4-3-3": _slots([
        ("goalkeeper", -45, 0),
        ("defender", -35, -20), ("defender", -35, -7), ("defender", -35, 7), ("defender", -35, 20),
        ("midfielder", -15, -12), ("midfielder", -15, 0), ("midfielder", -15, 12),
        ("forward", 5, -15), ("forward", 5, 0), ("forward", 5, 15),
    ]),
    "3-5-2": _slots([
        ("goalkeeper", -45, 0),
        ("defender", -35, -15), ("defender", -35, 0), ("defender", -35, 15),
        ("midfielder", -15, -20), ("midfielder", -15, -10), ("midfielder", -15, 0),
        ("midfielder", -15, 10), ("midfielder", -15, 20),
        ("forward", 5, -10), ("forward", 5, 10),
    ]),
    "4-5-1": _slots([
        ("goalkeeper", -45, 0),
        ("defender", -35, -20), ("defender", -35, -7), ("defender", -35, 7), ("defender", -35, 20),
        ("midfielder", -15, -20), ("midfielder", -15, -10), ("midfielder", -15, 0),
        ("midfielder", -15, 10), ("midfielder", -15, 20),
        ("forward", 5, 0),
    ]),
    "4-2-3-1": _slots([
        ("goalkeeper", -45, 0),
        ("defender", -35, -20), ("defender", -35, -7), ("defender", -35, 7), ("defender", -35, 20),
        ("midfielder", -25, -8), ("midfielder", -25, 8),
        ("midfielder", -10, -15), ("midfielder", -10, 0), ("midfielder", -10, 15),
        ("forward", 5, 0),
    ]),
    "4-3-2-1": _slots([
        ("goalkeeper", -45, 0),
        ("defender", -35, -20), ("defender", -35, -7), ("defender", -35, 7), ("defender", -35, 20),
        ("midfielder", -20, -12), ("midfielder", -20, 0), ("midfielder", -20, 12),
        ("midfielder", -5, -10), ("midfielder", -5, 10),
        ("forward", 5, 0),
    ]),
}


def available_formations() -> List[str]:
    return list(FORMATIONS.keys())


def get_formation(name: str) -> List[FormationSlot]:
    """
    Look up a formation template.

    Raises:
        FormationNotFoundError: if the name is not in the catalog
    """
    try:
        return list(FORMATIONS[name])
    except KeyError:
        raise FormationNotFoundError(name) from None


def create_team(team: Team, formation: str) -> List[Entity]:
    """
    Instantiate a squad from a formation template.

    The away side is mirrored across the centre line so both teams face
    each other. Home ids run 1..n, away ids 101..100+n.
    """
    slots = get_formation(formation)
    mirror = 1 if team is Team.HOME else -1
    id_offset = 0 if team is Team.HOME else AWAY_ID_OFFSET
    prefix = "H" if team is Team.HOME else "A"

    players = []
    for index, slot in enumerate(slots):
        number = index + 1
        players.append(Entity(
            id=number + id_offset,
            team=team,
            role=slot.role,
            position=Position(slot.x * mirror, slot.y),
            name=f"{prefix}{number}",
            number=number,
        ))

    logger.debug(f"Created {team.value} squad in {formation} ({len(players)} players)")
    return players


def initial_positions(entities: List[Entity]) -> Dict[EntityId, Position]:
    """Snapshot of entity positions for a keyframe."""
    return {entity.id: entity.position for entity in entities}
