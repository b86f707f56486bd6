"""
Context summaries for the external advisory service.

The board only flattens its current state into text and hands it over;
the returned advice is passed back to the caller untouched.
"""

from abc import ABC, abstractmethod
from typing import Optional

from tactical_board.analysis.spatial import SpatialMetrics
from tactical_board.core.models import Phase, Team


class AdvisoryService(ABC):
    """Text generator that answers a tactical context summary."""

    @abstractmethod
    def ask(self, context_summary: str) -> str:
        ...


def build_context_summary(
    metrics: SpatialMetrics,
    home_formation: Optional[str] = None,
    away_formation: Optional[str] = None,
    phase: Optional[Phase] = None,
    current_time: Optional[float] = None
) -> str:
    """
    Flatten formations, shape metrics and collision count into plain lines.

    Args:
        metrics: Spatial metrics for the current position set
        home_formation: Selected home formation name (falls back to detected shape)
        away_formation: Selected away formation name (falls back to detected shape)
        phase: Current planning phase
        current_time: Playback time in seconds

    Returns:
        One "Key: value" line per fact
    """
    lines = [
        f"Home Formation: {home_formation or metrics.formations.get(Team.HOME, 'Unknown')}",
        f"Away Formation: {away_formation or metrics.formations.get(Team.AWAY, 'Unknown')}",
        f"Current Phase: {phase.value if phase else 'Unknown'}",
    ]
    if current_time is not None:
        lines.append(f"Playback Time: {current_time:.1f}s")

    for team in Team:
        label = team.value.capitalize()
        shape = metrics.team_shapes.get(team)
        if shape is None:
            lines.append(f"{label} Team Shape: Unknown")
            continue
        lines.append(f"{label} Team Shape: {shape.shape.value}")
        lines.append(f"{label} Team Width: {shape.width:.1f}m")
        lines.append(f"{label} Compactness: {shape.compactness:.1f}m")
        if shape.defensive_line_height is not None:
            lines.append(f"{label} Defensive Line: {shape.defensive_line_height:.1f}m")

    lines.append(f"Collisions: {metrics.collision_count}")
    return "\n".join(lines)
