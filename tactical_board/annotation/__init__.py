"""
Tactical Board - Annotation Module
"""

from tactical_board.annotation.session import (
    AnnotationSession,
    DrawingTool,
    annotation_distance,
    DEFAULT_ERASER_RADIUS,
)

__all__ = [
    "AnnotationSession",
    "DrawingTool",
    "annotation_distance",
    "DEFAULT_ERASER_RADIUS",
]
