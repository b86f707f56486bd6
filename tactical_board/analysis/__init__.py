"""
Tactical Board - Analysis Module
"""

# Spatial analytics
from .spatial import (
    TeamShape,
    TeamShapeMetrics,
    CollisionWarning,
    SpatialMetrics,
    classify_shape,
    compute_collisions,
    compute_team_shape,
    defensive_line_height,
    offside_line,
    detect_formation,
    compute_spatial_metrics,
    DEFAULT_COLLISION_THRESHOLD,
    COMPACT_MAX_WIDTH,
    COMPACT_MAX_SPREAD,
    STRETCHED_MIN_WIDTH,
    STRETCHED_MIN_SPREAD,
)

# Formation catalog
from .formations import (
    FormationSlot,
    FORMATIONS,
    available_formations,
    get_formation,
    create_team,
    initial_positions,
)

# Movement readouts
from .movement import MovementTracker, TrailPoint

# Advisory context
from .advisory import AdvisoryService, build_context_summary

__all__ = [
    # Spatial
    "TeamShape",
    "TeamShapeMetrics",
    "CollisionWarning",
    "SpatialMetrics",
    "classify_shape",
    "compute_collisions",
    "compute_team_shape",
    "defensive_line_height",
    "offside_line",
    "detect_formation",
    "compute_spatial_metrics",
    "DEFAULT_COLLISION_THRESHOLD",
    "COMPACT_MAX_WIDTH",
    "COMPACT_MAX_SPREAD",
    "STRETCHED_MIN_WIDTH",
    "STRETCHED_MIN_SPREAD",
    # Formations
    "FormationSlot",
    "FORMATIONS",
    "available_formations",
    "get_formation",
    "create_team",
    "initial_positions",
    # Movement
    "MovementTracker",
    "TrailPoint",
    # Advisory
    "AdvisoryService",
    "build_context_summary",
]
