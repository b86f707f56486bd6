"""
Custom exceptions for the Tactical Board engine

Provides structured error handling with context for debugging.
Degenerate inputs (empty timeline, too few defenders) are not errors and
never raise; these classes cover malformed input and collaborator failures.
"""

from typing import Optional, Dict, Any


class TacticalBoardError(Exception):
    """Base exception for all tactical board errors"""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


# Validation Errors
class ValidationError(TacticalBoardError):
    """Base class for rejected input"""
    pass


class ImportValidationError(ValidationError):
    """Movement data import was rejected"""

    def __init__(self, reason: str = "", source: str = None, index: int = None):
        ctx = {}
        if source:
            ctx["source"] = source
        if index is not None:
            ctx["index"] = index
        super().__init__(
            f"Invalid movement data: {reason}" if reason else "Invalid movement data",
            ctx
        )


class InvalidKeyframeError(ValidationError):
    """Keyframe time outside the allowed range"""

    def __init__(self, time: float, reason: str = ""):
        super().__init__(
            f"Invalid keyframe: {reason}" if reason else "Invalid keyframe",
            {"time": time}
        )


class InvalidSpeedError(ValidationError):
    """Playback speed must be positive"""

    def __init__(self, speed: float):
        super().__init__("Playback speed must be greater than zero", {"speed": speed})


class InvalidDurationError(ValidationError):
    """Duration shorter than the timeline content"""

    def __init__(self, duration: float, minimum: float = None):
        ctx = {"duration": duration}
        if minimum is not None:
            ctx["minimum"] = minimum
        super().__init__("Invalid duration", ctx)


# Catalog Errors
class CatalogError(TacticalBoardError):
    """Base class for formation catalog errors"""
    pass


class FormationNotFoundError(CatalogError):
    """Formation name not present in the catalog"""

    def __init__(self, name: str):
        super().__init__("Unknown formation", {"formation": name})


# Persistence Errors
class PersistenceError(TacticalBoardError):
    """Base class for plan storage errors"""
    pass


class PlanNotFoundError(PersistenceError):
    """Saved plan not found in the database"""

    def __init__(self, plan_id: int):
        super().__init__("Tactical plan not found", {"plan_id": plan_id})


class PlanSaveError(PersistenceError):
    """Failed to persist a plan"""

    def __init__(self, name: str = None, reason: str = ""):
        ctx = {}
        if name:
            ctx["name"] = name
        super().__init__(
            f"Failed to save plan: {reason}" if reason else "Failed to save plan",
            ctx
        )


# Configuration Errors
class ConfigurationError(TacticalBoardError):
    """Configuration-related errors"""
    pass


class InvalidConfigError(ConfigurationError):
    """Invalid configuration value"""

    def __init__(self, key: str, value: Any, expected: str = ""):
        ctx = {"key": key, "value": value}
        if expected:
            ctx["expected"] = expected
        super().__init__("Invalid configuration", ctx)
