"""
Pytest configuration and shared fixtures for Tactical Board tests.
"""

import pytest
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import Settings
from tactical_board.core.models import Entity, Position, Role, Team
from tactical_board.core.playback import ManualFrameScheduler
from tactical_board.core.timeline import Timeline


@pytest.fixture
def project_root():
    """Get project root directory"""
    return Path(__file__).parent.parent


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from .env and the real data directory"""
    return Settings(
        _env_file=None,
        data_dir=str(tmp_path / "data"),
        output_dir=str(tmp_path / "outputs"),
    )


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def scenario_timeline():
    """One entity moving (20,-10) -> (30,-12) -> (40,-15) -> (20,-10) over 15s"""
    timeline = Timeline()
    for time, (x, y) in zip((0, 5, 10, 15), ((20, -10), (30, -12), (40, -15), (20, -10))):
        timeline.insert_keyframe(float(time), {1: Position(float(x), float(y))})
    return timeline


@pytest.fixture
def make_entity():
    """Factory for single entities"""
    def _make(entity_id, x, y, team=Team.HOME, role=Role.MIDFIELDER):
        return Entity(id=entity_id, team=team, role=role, position=Position(float(x), float(y)))
    return _make


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across sessions"""
    from tactical_board.database.models import Base

    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def repository(session_factory):
    from tactical_board.database.repository import PlanRepository
    return PlanRepository(session_factory)


@pytest.fixture
def board(test_settings, scheduler):
    """Board with both teams loaded, driven by the manual scheduler"""
    from tactical_board.board.controller import TacticalBoard

    b = TacticalBoard(test_settings, scheduler=scheduler)
    b.load_formations("4-4-2", "4-3-3")
    yield b
    b.release()
