"""
Tactical Board - Database Models
SQLAlchemy ORM models for saved tactical plans
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    create_engine, Column, Integer, String, Float,
    DateTime, ForeignKey, Text, JSON, Index
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from sqlalchemy.pool import QueuePool

import logging

from config import settings

logger = logging.getLogger(__name__)

# Create base class for models
Base = declarative_base()


# ============================================
# Models
# ============================================

class Plan(Base):
    """
    A saved tactical plan: timeline, drawings and event markers
    """
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200))
    duration = Column(Float, default=0.0)

    # Free-form metadata (formations, speed, notes)
    plan_metadata = Column("metadata", JSON, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    keyframes = relationship(
        "PlanKeyframe", back_populates="plan",
        cascade="all, delete-orphan", order_by="PlanKeyframe.time"
    )
    annotations = relationship(
        "PlanAnnotation", back_populates="plan",
        cascade="all, delete-orphan", order_by="PlanAnnotation.sequence"
    )
    event_markers = relationship(
        "PlanEventMarker", back_populates="plan",
        cascade="all, delete-orphan", order_by="PlanEventMarker.time"
    )

    def __repr__(self):
        return f"<Plan(id={self.id}, name={self.name}, keyframes={len(self.keyframes)})>"


class PlanKeyframe(Base):
    """
    One keyframe of a plan's timeline
    """
    __tablename__ = "plan_keyframes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False)

    time = Column(Float, nullable=False)
    phase = Column(String(20))

    # {"<entity_id>": [x, y, z]}
    positions = Column(JSON, nullable=False)

    plan = relationship("Plan", back_populates="keyframes")

    __table_args__ = (
        Index("idx_plan_keyframe_time", "plan_id", "time", unique=True),
    )

    def __repr__(self):
        return f"<PlanKeyframe(plan={self.plan_id}, time={self.time})>"


class PlanAnnotation(Base):
    """
    A drawing on the pitch
    """
    __tablename__ = "plan_annotations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False)

    # Keeps drawing order
    sequence = Column(Integer, nullable=False, default=0)
    annotation_id = Column(Integer, nullable=False)
    kind = Column(String(20), nullable=False)
    points = Column(JSON, nullable=False)  # [[x, y, z], ...]
    color = Column(String(20))
    width = Column(Float)
    radius = Column(Float)

    plan = relationship("Plan", back_populates="annotations")

    def __repr__(self):
        return f"<PlanAnnotation(plan={self.plan_id}, kind={self.kind})>"


class PlanEventMarker(Base):
    """
    A labeled seek target on the plan's timeline
    """
    __tablename__ = "plan_event_markers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False)

    time = Column(Float, nullable=False)
    label = Column(String(200), nullable=False)
    description = Column(Text)
    event_type = Column(String(30))
    related_entity_ids = Column(JSON)

    plan = relationship("Plan", back_populates="event_markers")

    __table_args__ = (
        Index("idx_plan_event_time", "plan_id", "time"),
    )

    def __repr__(self):
        return f"<PlanEventMarker(plan={self.plan_id}, time={self.time}, label={self.label})>"


# ============================================
# Database Session Management
# ============================================

def get_engine(connection_string: Optional[str] = None):
    """Create and return database engine with connection pooling"""
    connection_string = connection_string or settings.db_connection_string

    # SQLite doesn't support connection pooling
    if connection_string.startswith("sqlite"):
        return create_engine(
            connection_string,
            connect_args={"check_same_thread": False},
            echo=settings.log_level == "DEBUG"
        )

    return create_engine(
        connection_string,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=settings.log_level == "DEBUG"
    )


def get_session_factory(engine=None):
    """Create session factory"""
    return sessionmaker(bind=engine or get_engine())


def init_database(engine=None):
    """Initialize database - create all tables"""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    logger.info("Database initialized: %s", engine.url)
    return engine


def drop_database(engine=None):
    """Drop all tables - USE WITH CAUTION"""
    engine = engine or get_engine()
    Base.metadata.drop_all(engine)
    logger.warning("Database tables dropped: %s", engine.url)


# Context manager for sessions
class DatabaseSession:
    """Context manager for database sessions"""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()
        self._session = None

    def __enter__(self):
        self._session = self._session_factory()
        return self._session

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is not None:
                self._session.rollback()
            else:
                self._session.commit()
        finally:
            self._session.close()
        return False


def get_db_session(session_factory=None):
    """Get a database session context manager"""
    return DatabaseSession(session_factory)
