"""
Tactical Board - Database Module
SQLAlchemy ORM models and plan repository.
"""

from tactical_board.database.models import (
    Base,
    Plan,
    PlanKeyframe,
    PlanAnnotation,
    PlanEventMarker,
    DatabaseSession,
    get_engine,
    get_session_factory,
    get_db_session,
    init_database,
    drop_database,
)
from tactical_board.database.repository import PlanRepository, LoadedPlan, PlanSummary

__all__ = [
    "Base",
    "Plan",
    "PlanKeyframe",
    "PlanAnnotation",
    "PlanEventMarker",
    "DatabaseSession",
    "get_engine",
    "get_session_factory",
    "get_db_session",
    "init_database",
    "drop_database",
    "PlanRepository",
    "LoadedPlan",
    "PlanSummary",
]
