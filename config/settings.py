"""
Tactical Board - Application Settings
Uses Pydantic for type-safe configuration management
"""

import logging
from pathlib import Path
from typing import Literal, Optional
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and .env file.
    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ==========================================
    # Pitch Geometry (meters)
    # ==========================================
    pitch_length: float = Field(default=105.0, gt=0, description="Goal line to goal line")
    pitch_width: float = Field(default=68.0, gt=0, description="Touchline to touchline")

    @property
    def half_length(self) -> float:
        return self.pitch_length / 2

    @property
    def half_width(self) -> float:
        return self.pitch_width / 2

    # ==========================================
    # Analytics
    # ==========================================
    collision_threshold: float = Field(
        default=3.0,
        gt=0,
        description="Distance below which two players raise a collision warning"
    )

    # ==========================================
    # Playback
    # ==========================================
    default_duration: float = Field(
        default=15.0,
        gt=0,
        description="Default timeline duration in seconds"
    )
    default_speed: float = Field(
        default=1.0,
        gt=0,
        le=8.0,
        description="Default playback speed multiplier"
    )
    frame_rate: int = Field(
        default=60,
        ge=1,
        le=240,
        description="Animation frames per second for the Qt scheduler"
    )
    loop_playback: bool = Field(default=False, description="Wrap to the start instead of pausing at the end")
    trail_length_seconds: float = Field(
        default=3.0,
        ge=0,
        description="How much movement history is kept per player trail"
    )

    # ==========================================
    # Drawing Tools
    # ==========================================
    eraser_radius: float = Field(
        default=2.0,
        gt=0,
        description="Hit radius of the eraser in meters"
    )

    # ==========================================
    # Database Configuration
    # ==========================================
    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy connection string (default: SQLite file in data dir)"
    )
    db_filename: str = Field(default="tactical_board.db", description="SQLite file name")

    @property
    def db_connection_string(self) -> str:
        """Get the database connection string"""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.get_data_dir() / self.db_filename}"

    # ==========================================
    # Logging
    # ==========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Application logging level"
    )

    # ==========================================
    # Paths
    # ==========================================
    data_dir: str = Field(default="data", description="Data directory")
    output_dir: str = Field(default="data/outputs", description="Output directory")

    @property
    def project_root(self) -> Path:
        """Get the project root directory"""
        return Path(__file__).parent.parent

    def get_data_dir(self) -> Path:
        """Get absolute path to data directory"""
        path = self.project_root / self.data_dir
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_output_dir(self) -> Path:
        """Get absolute path to output directory"""
        path = self.project_root / self.output_dir
        path.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        if isinstance(value, str):
            return value.upper()
        return value

    @model_validator(mode="after")
    def _check_eraser_radius(self):
        if self.eraser_radius > min(self.pitch_length, self.pitch_width):
            raise ValueError("eraser_radius cannot exceed the pitch dimensions")
        return self


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment"""
    global settings
    settings = Settings()
    logger.debug("Settings reloaded")
    return settings
