"""
Tactical Board - Rendering Module
"""

from tactical_board.render.pitch_renderer import (
    Renderer,
    PitchRenderer,
    MarkerStyle,
    hex_to_bgr,
    TEAM_COLORS,
)

__all__ = [
    "Renderer",
    "PitchRenderer",
    "MarkerStyle",
    "hex_to_bgr",
    "TEAM_COLORS",
]
