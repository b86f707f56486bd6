"""
Tactical Board - Pitch Renderer
Top-down pitch image drawn with OpenCV

The engine pushes positions, annotations and overlays through the Renderer
interface. Visual state (marker colours, labels) lives in the renderer's own
side table keyed by entity id, so the core model never holds drawing handles.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

import cv2
import numpy as np
from loguru import logger

from tactical_board.analysis.movement import TrailPoint
from tactical_board.analysis.spatial import SpatialMetrics
from tactical_board.core.geometry import bounding_box
from tactical_board.core.models import (
    Annotation,
    AnnotationKind,
    Entity,
    EntityId,
    Position,
    Team,
)
from tactical_board.exceptions import InvalidConfigError

BGR = Tuple[int, int, int]

PITCH_GREEN: BGR = (34, 139, 34)
WHITE: BGR = (255, 255, 255)
OFFSIDE_COLOR: BGR = (255, 0, 255)
COLLISION_COLOR: BGR = (0, 0, 255)

TEAM_COLORS: Dict[Team, BGR] = {
    Team.HOME: (255, 102, 0),  # blue
    Team.AWAY: (0, 0, 220),    # red
}


def hex_to_bgr(color: str) -> BGR:
    """'#rrggbb' -> OpenCV BGR tuple"""
    value = color.lstrip("#")
    if len(value) != 6:
        return WHITE
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return (b, g, r)


class Renderer(ABC):
    """Receiver of everything the board displays"""

    @abstractmethod
    def update_positions(self, positions: Mapping[EntityId, Position]):
        ...

    @abstractmethod
    def update_annotations(self, annotations: List[Annotation]):
        ...

    @abstractmethod
    def update_overlays(
        self,
        metrics: SpatialMetrics,
        trails: Optional[Mapping[EntityId, List[TrailPoint]]] = None
    ):
        ...


@dataclass
class MarkerStyle:
    color: BGR
    label: str = ""
    radius: int = 10


class PitchRenderer(Renderer):
    """
    Draws the board state onto a numpy image.

    Pitch coordinates are centred on the halfway spot with +x towards the
    away goal and +y towards the top of the image.
    """

    def __init__(
        self,
        pitch_length: float = 105.0,
        pitch_width: float = 68.0,
        pixels_per_meter: float = 8.0,
        margin: int = 20
    ):
        if pixels_per_meter <= 0:
            raise InvalidConfigError("pixels_per_meter", pixels_per_meter, "> 0")

        self.pitch_length = pitch_length
        self.pitch_width = pitch_width
        self.scale = pixels_per_meter
        self.margin = margin

        self.output_width = int(pitch_length * pixels_per_meter) + 2 * margin
        self.output_height = int(pitch_width * pixels_per_meter) + 2 * margin

        self._markers: Dict[EntityId, MarkerStyle] = {}
        self._positions: Dict[EntityId, Position] = {}
        self._annotations: List[Annotation] = []
        self._metrics: Optional[SpatialMetrics] = None
        self._trails: Dict[EntityId, List[TrailPoint]] = {}

    # ------------------------------------------------------------------
    # Side table
    # ------------------------------------------------------------------

    def register_entities(self, entities: Iterable[Entity]):
        """Create marker styles for entities (replaces the side table)."""
        self._markers = {
            e.id: MarkerStyle(
                color=TEAM_COLORS[e.team],
                label=str(e.number) if e.number is not None else e.name,
            )
            for e in entities
        }
        logger.debug(f"Registered {len(self._markers)} markers")

    def marker_style(self, entity_id: EntityId) -> Optional[MarkerStyle]:
        return self._markers.get(entity_id)

    # ------------------------------------------------------------------
    # Renderer interface
    # ------------------------------------------------------------------

    def update_positions(self, positions: Mapping[EntityId, Position]):
        self._positions = dict(positions)

    def update_annotations(self, annotations: List[Annotation]):
        self._annotations = list(annotations)

    def update_overlays(
        self,
        metrics: SpatialMetrics,
        trails: Optional[Mapping[EntityId, List[TrailPoint]]] = None
    ):
        self._metrics = metrics
        self._trails = dict(trails or {})

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def to_pixel(self, position: Position) -> Tuple[int, int]:
        px = self.margin + (position.x + self.pitch_length / 2) * self.scale
        py = self.margin + (self.pitch_width / 2 - position.y) * self.scale
        return int(round(px)), int(round(py))

    def render(self) -> np.ndarray:
        """Draw the current state and return a BGR image."""
        img = np.zeros((self.output_height, self.output_width, 3), dtype=np.uint8)
        img[:] = PITCH_GREEN

        self._draw_pitch_markings(img)
        self._draw_annotations(img)
        self._draw_trails(img)
        self._draw_overlays(img)
        self._draw_markers(img)
        return img

    def save(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        cv2.imwrite(str(path), self.render())
        logger.info(f"Saved pitch image to: {path}")
        return path

    def _draw_pitch_markings(self, img: np.ndarray):
        thickness = 2
        hl, hw = self.pitch_length / 2, self.pitch_width / 2

        cv2.rectangle(img, self.to_pixel(Position(-hl, hw)), self.to_pixel(Position(hl, -hw)), WHITE, thickness)
        cv2.line(img, self.to_pixel(Position(0, hw)), self.to_pixel(Position(0, -hw)), WHITE, thickness)
        cv2.circle(img, self.to_pixel(Position(0, 0)), int(9.15 * self.scale), WHITE, thickness)

        # Penalty areas (16.5m x 40.32m) and goal areas (5.5m x 18.32m)
        for depth, height in ((16.5, 40.32), (5.5, 18.32)):
            top, bottom = height / 2, -height / 2
            cv2.rectangle(img, self.to_pixel(Position(-hl, top)),
                          self.to_pixel(Position(-hl + depth, bottom)), WHITE, thickness)
            cv2.rectangle(img, self.to_pixel(Position(hl - depth, top)),
                          self.to_pixel(Position(hl, bottom)), WHITE, thickness)

    def _draw_annotations(self, img: np.ndarray):
        for annotation in self._annotations:
            color = hex_to_bgr(annotation.style.color)
            width = max(1, int(annotation.style.width))
            points = annotation.anchor_points

            if annotation.kind is AnnotationKind.LINE:
                cv2.line(img, self.to_pixel(points[0]), self.to_pixel(points[1]), color, width)
            elif annotation.kind is AnnotationKind.ARROW:
                cv2.arrowedLine(img, self.to_pixel(points[0]), self.to_pixel(points[1]),
                                color, width, tipLength=0.15)
            elif annotation.kind is AnnotationKind.RECT:
                min_x, min_y, max_x, max_y = bounding_box(points)
                cv2.rectangle(img, self.to_pixel(Position(min_x, max_y)),
                              self.to_pixel(Position(max_x, min_y)), color, width)
            elif annotation.kind is AnnotationKind.CIRCLE:
                radius = int((annotation.radius or 0.0) * self.scale)
                cv2.circle(img, self.to_pixel(points[0]), radius, color, width)
            else:
                path = np.array([self.to_pixel(p) for p in annotation.path_points()], dtype=np.int32)
                cv2.polylines(img, [path], False, color, width)

    def _draw_trails(self, img: np.ndarray):
        for entity_id, trail in self._trails.items():
            if len(trail) < 2:
                continue
            style = self._markers.get(entity_id)
            color = style.color if style else WHITE
            path = np.array([self.to_pixel(t.position) for t in trail], dtype=np.int32)
            cv2.polylines(img, [path], False, color, 1)

    def _draw_overlays(self, img: np.ndarray):
        if self._metrics is None:
            return

        hw = self.pitch_width / 2
        for team, line_x in self._metrics.offside_lines.items():
            if line_x is None:
                continue
            top = self.to_pixel(Position(line_x, hw))
            bottom = self.to_pixel(Position(line_x, -hw))
            cv2.line(img, top, bottom, OFFSIDE_COLOR, 1)

        for warning in self._metrics.collisions:
            for entity_id in warning.pair:
                position = self._positions.get(entity_id)
                if position is not None:
                    cv2.circle(img, self.to_pixel(position), 16, COLLISION_COLOR, 2)

    def _draw_markers(self, img: np.ndarray):
        for entity_id, position in self._positions.items():
            style = self._markers.get(entity_id) or MarkerStyle(color=WHITE, label=str(entity_id))
            center = self.to_pixel(position)
            cv2.circle(img, center, style.radius, style.color, -1)
            cv2.circle(img, center, style.radius, WHITE, 2)
            if style.label:
                cv2.putText(img, style.label, (center[0] - 6, center[1] + 4),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.35, WHITE, 1)
