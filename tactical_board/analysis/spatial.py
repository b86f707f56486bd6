"""
Tactical Board - Spatial Analytics
Collision warnings, team shape, defensive line, offside line and formation shape.

Every function here is a pure computation over the current entity set.
Nothing is cached; callers recompute after each interpolation tick or drag.
"""

from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
from loguru import logger

from tactical_board.core.geometry import distance
from tactical_board.core.models import Entity, EntityId, Position, Role, Team

DEFAULT_COLLISION_THRESHOLD = 3.0

# Team shape classification thresholds (meters)
COMPACT_MAX_WIDTH = 30.0
COMPACT_MAX_SPREAD = 15.0
STRETCHED_MIN_WIDTH = 45.0
STRETCHED_MIN_SPREAD = 20.0


class TeamShape(str, Enum):
    COMPACT = "compact"
    BALANCED = "balanced"
    STRETCHED = "stretched"


@dataclass(frozen=True)
class CollisionWarning:
    """Two players closer than the collision threshold. first_id < second_id."""
    first_id: EntityId
    second_id: EntityId
    distance: float

    @property
    def pair(self):
        return (self.first_id, self.second_id)


@dataclass
class TeamShapeMetrics:
    """Shape of one team's outfield players"""
    team: Team
    shape: TeamShape
    width: float  # lateral spread
    compactness: float  # mean pairwise distance
    defensive_line_height: Optional[float]
    average_position: Position
    player_count: int


@dataclass
class SpatialMetrics:
    """Everything the board overlays for one position set"""
    collisions: List[CollisionWarning] = field(default_factory=list)
    team_shapes: Dict[Team, TeamShapeMetrics] = field(default_factory=dict)
    offside_lines: Dict[Team, Optional[float]] = field(default_factory=dict)
    formations: Dict[Team, str] = field(default_factory=dict)

    @property
    def collision_count(self) -> int:
        return len(self.collisions)


def classify_shape(width: float, compactness: float) -> TeamShape:
    if width < COMPACT_MAX_WIDTH and compactness < COMPACT_MAX_SPREAD:
        return TeamShape.COMPACT
    if width > STRETCHED_MIN_WIDTH or compactness > STRETCHED_MIN_SPREAD:
        return TeamShape.STRETCHED
    return TeamShape.BALANCED


def compute_collisions(
    entities: Iterable[Entity],
    threshold: float = DEFAULT_COLLISION_THRESHOLD
) -> List[CollisionWarning]:
    """
    Report every unordered pair of players closer than threshold.

    Each pair appears once as (lower id, higher id); results are sorted by
    id pair, so the output does not depend on input order.
    """
    ordered = sorted(entities, key=lambda e: e.id)
    warnings = []

    for a, b in combinations(ordered, 2):
        if a.id == b.id:
            continue
        dist = distance(a.position, b.position)
        if dist < threshold:
            warnings.append(CollisionWarning(a.id, b.id, dist))

    if warnings:
        logger.debug(f"{len(warnings)} collision warning(s) below {threshold:.1f}m")
    return warnings


def _outfield(entities: Iterable[Entity], team: Team) -> List[Entity]:
    return [e for e in entities if e.team is team and not e.is_goalkeeper]


def _mean_pairwise_distance(points: np.ndarray) -> float:
    if len(points) < 2:
        return 0.0
    distances = [
        np.linalg.norm(points[i] - points[j])
        for i, j in combinations(range(len(points)), 2)
    ]
    return float(np.mean(distances))


def defensive_line_height(entities: Iterable[Entity], team: Team) -> Optional[float]:
    """Mean longitudinal position of the team's defenders, or None without defenders."""
    xs = [e.position.x for e in entities if e.team is team and e.role is Role.DEFENDER]
    if not xs:
        return None
    return float(np.mean(xs))


def compute_team_shape(entities: Sequence[Entity], team: Team) -> Optional[TeamShapeMetrics]:
    """
    Width, compactness and shape class of a team's outfield players.

    Args:
        entities: Current entity set (both teams allowed)
        team: Team to measure

    Returns:
        TeamShapeMetrics, or None when the team has no outfield players
    """
    players = _outfield(entities, team)
    if not players:
        return None

    points = np.array([(p.position.x, p.position.y) for p in players], dtype=float)

    width = float(np.max(points[:, 1]) - np.min(points[:, 1]))
    compactness = _mean_pairwise_distance(points)
    centroid = np.mean(points, axis=0)

    return TeamShapeMetrics(
        team=team,
        shape=classify_shape(width, compactness),
        width=width,
        compactness=compactness,
        defensive_line_height=defensive_line_height(entities, team),
        average_position=Position(float(centroid[0]), float(centroid[1])),
        player_count=len(players),
    )


def offside_line(entities: Iterable[Entity], defending_team: Team) -> Optional[float]:
    """
    Offside reference line: the second-deepest defender of the defending team.

    Defenders are ordered deepest first, toward the defending team's own
    goal. Returns None with fewer than two defenders.
    """
    direction = defending_team.own_goal_direction
    defenders = sorted(
        (e.position.x for e in entities
         if e.team is defending_team and e.role is Role.DEFENDER),
        key=lambda x: x * direction,
        reverse=True
    )
    if len(defenders) < 2:
        return None
    return defenders[1]


def detect_formation(entities: Iterable[Entity], team: Optional[Team] = None) -> str:
    """
    Formation string from role counts, ordered defenders-midfielders-forwards.

    Goalkeepers are not counted. When team is None every entity is counted.
    """
    counts = {Role.DEFENDER: 0, Role.MIDFIELDER: 0, Role.FORWARD: 0}
    for entity in entities:
        if team is not None and entity.team is not team:
            continue
        if entity.role in counts:
            counts[entity.role] += 1

    return f"{counts[Role.DEFENDER]}-{counts[Role.MIDFIELDER]}-{counts[Role.FORWARD]}"


def compute_spatial_metrics(
    entities: Sequence[Entity],
    collision_threshold: float = DEFAULT_COLLISION_THRESHOLD
) -> SpatialMetrics:
    """Recompute all overlays for the given position set."""
    metrics = SpatialMetrics(collisions=compute_collisions(entities, collision_threshold))

    for team in Team:
        shape = compute_team_shape(entities, team)
        if shape is not None:
            metrics.team_shapes[team] = shape
        metrics.offside_lines[team] = offside_line(entities, team)
        metrics.formations[team] = detect_formation(entities, team)

    return metrics
