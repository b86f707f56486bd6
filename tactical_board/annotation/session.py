"""
Tactical Board - Drawing Session
Turns pointer gestures into pitch annotations.

Two-click tools (line, arrow, rect, circle) finalize on the second
pointer-down; drags between the clicks are ignored. Freehand records while
the button is held and finalizes on pointer-up. The eraser removes every
annotation near the pointer.
"""

from enum import Enum
from itertools import count
from typing import Callable, Dict, List, Optional

from loguru import logger

from tactical_board.core.geometry import distance, point_segment_distance, polyline_distance
from tactical_board.core.models import Annotation, AnnotationKind, AnnotationStyle, Position

AnnotationListener = Callable[[List[Annotation]], None]

DEFAULT_ERASER_RADIUS = 2.0
MIN_FREEHAND_POINTS = 2


class DrawingTool(str, Enum):
    NONE = "none"
    LINE = "line"
    ARROW = "arrow"
    RECT = "rect"
    CIRCLE = "circle"
    ZONE = "zone"  # circle alias
    FREEHAND = "freehand"
    ERASER = "eraser"


TOOL_KINDS: Dict[DrawingTool, AnnotationKind] = {
    DrawingTool.LINE: AnnotationKind.LINE,
    DrawingTool.ARROW: AnnotationKind.ARROW,
    DrawingTool.RECT: AnnotationKind.RECT,
    DrawingTool.CIRCLE: AnnotationKind.CIRCLE,
    DrawingTool.ZONE: AnnotationKind.CIRCLE,
    DrawingTool.FREEHAND: AnnotationKind.FREEHAND,
}

DEFAULT_COLORS: Dict[AnnotationKind, str] = {
    AnnotationKind.LINE: "#ffffff",
    AnnotationKind.ARROW: "#ff0000",
    AnnotationKind.RECT: "#ffffff",
    AnnotationKind.CIRCLE: "#ffff00",
    AnnotationKind.FREEHAND: "#00ff00",
}

def _rect_edges(a: Position, b: Position):
    c1 = Position(a.x, a.y)
    c2 = Position(b.x, a.y)
    c3 = Position(b.x, b.y)
    c4 = Position(a.x, b.y)
    return [(c1, c2), (c2, c3), (c3, c4), (c4, c1)]


def annotation_distance(annotation: Annotation, point: Position) -> float:
    """
    Distance from point to the drawn shape.

    Segments (line, arrow) and rectangle edges use the nearest point on the
    segment; circles count as hit anywhere inside the zone; freehand paths
    use the smoothed polyline.
    """
    kind = annotation.kind
    points = annotation.anchor_points

    if kind in (AnnotationKind.LINE, AnnotationKind.ARROW):
        return point_segment_distance(point, points[0], points[1])

    if kind is AnnotationKind.RECT:
        return min(point_segment_distance(point, s, e) for s, e in _rect_edges(points[0], points[1]))

    if kind is AnnotationKind.CIRCLE:
        from_center = distance(point, points[0])
        return max(0.0, from_center - (annotation.radius or 0.0))

    return polyline_distance(point, annotation.path_points())


class AnnotationSession:
    """
    Gesture state machine for one drawing surface.

    Finalized annotations are independent of the playback timeline.
    """

    def __init__(self, eraser_radius: float = DEFAULT_ERASER_RADIUS):
        self.eraser_radius = eraser_radius
        self._tool = DrawingTool.NONE
        self._annotations: List[Annotation] = []
        self._pending: List[Position] = []
        self._pointer_held = False
        self._ids = count(1)
        self._colors: Dict[AnnotationKind, str] = dict(DEFAULT_COLORS)
        self._line_width = 3.0
        self._listeners: List[AnnotationListener] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def tool(self) -> DrawingTool:
        return self._tool

    @property
    def annotations(self) -> List[Annotation]:
        return list(self._annotations)

    @property
    def pending_points(self) -> List[Position]:
        """Points of the gesture in progress (not yet an annotation)."""
        return list(self._pending)

    @property
    def is_drawing(self) -> bool:
        return bool(self._pending)

    def set_tool(self, tool: DrawingTool):
        """Switch tool. Any unfinished gesture is discarded."""
        if self._pending:
            logger.debug(f"Discarded unfinished {self._tool.value} gesture")
        self._tool = DrawingTool(tool)
        self._reset_gesture()

    def set_color(self, color: str, kind: Optional[AnnotationKind] = None):
        """Set the stroke colour for one kind, or for every kind."""
        kinds = [kind] if kind is not None else list(self._colors)
        for k in kinds:
            self._colors[k] = color

    def set_line_width(self, width: float):
        self._line_width = width

    def add_listener(self, listener: AnnotationListener):
        self._listeners.append(listener)

    def _notify(self):
        snapshot = self.annotations
        for listener in list(self._listeners):
            listener(snapshot)

    def _reset_gesture(self):
        self._pending = []
        self._pointer_held = False

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def start_gesture(self, point: Position) -> Optional[Annotation]:
        """
        Pointer-down.

        Returns:
            The annotation finalized by this click, if any
        """
        if self._tool is DrawingTool.NONE:
            return None

        if self._tool is DrawingTool.ERASER:
            self.erase_near(point)
            return None

        kind = TOOL_KINDS[self._tool]

        if kind is AnnotationKind.FREEHAND:
            self._pending = [point]
            self._pointer_held = True
            return None

        if not self._pending:
            self._pending = [point]
            return None

        start = self._pending[0]
        if kind is AnnotationKind.CIRCLE:
            annotation = self._finalize(kind, [start], radius=distance(start, point))
        else:
            annotation = self._finalize(kind, [start, point])
        return annotation

    def append_gesture(self, point: Position, button_held: bool = True):
        """Pointer-move. Only freehand strokes record moves."""
        if self._tool is not DrawingTool.FREEHAND:
            return
        if not (self._pointer_held and button_held and self._pending):
            return
        self._pending.append(point)

    def finish_gesture(self, point: Optional[Position] = None) -> Optional[Annotation]:
        """
        Pointer-up. Finalizes a freehand stroke; two-click tools ignore it.

        Returns:
            The finalized freehand annotation, if any
        """
        if self._tool is not DrawingTool.FREEHAND or not self._pointer_held:
            return None

        if point is not None and (not self._pending or self._pending[-1] != point):
            self._pending.append(point)

        points = self._pending
        self._reset_gesture()
        if len(points) < MIN_FREEHAND_POINTS:
            logger.debug("Freehand stroke too short, discarded")
            return None
        return self._finalize(AnnotationKind.FREEHAND, points)

    def _finalize(self, kind: AnnotationKind, points: List[Position], radius: Optional[float] = None) -> Annotation:
        annotation = Annotation(
            id=next(self._ids),
            kind=kind,
            anchor_points=list(points),
            style=AnnotationStyle(color=self._colors[kind], width=self._line_width),
            radius=radius,
        )
        self._annotations.append(annotation)
        self._reset_gesture()
        logger.debug(f"Added {kind.value} annotation #{annotation.id}")
        self._notify()
        return annotation

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def erase_near(self, point: Position, radius: Optional[float] = None) -> List[Annotation]:
        """
        Remove every annotation within radius of point.

        Returns:
            The removed annotations
        """
        radius = self.eraser_radius if radius is None else radius
        removed = [a for a in self._annotations if annotation_distance(a, point) <= radius]
        if removed:
            removed_ids = {a.id for a in removed}
            self._annotations = [a for a in self._annotations if a.id not in removed_ids]
            logger.debug(f"Erased {len(removed)} annotation(s)")
            self._notify()
        return removed

    def remove(self, annotation_id: int) -> bool:
        before = len(self._annotations)
        self._annotations = [a for a in self._annotations if a.id != annotation_id]
        if len(self._annotations) != before:
            self._notify()
            return True
        return False

    def clear(self):
        self._annotations = []
        self._reset_gesture()
        self._notify()
        logger.info("Drawings cleared")

    def load(self, annotations: List[Annotation]):
        """Replace the annotation list (e.g. from a saved plan)."""
        self._annotations = list(annotations)
        self._reset_gesture()
        next_id = max((a.id for a in self._annotations), default=0) + 1
        self._ids = count(next_id)
        self._notify()
