"""
Geometry primitives for pitch coordinates.

Positions are (x, y) in meters with an optional display height z. Distances
are measured on the pitch plane, so z never takes part in them.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from tactical_board.core.models import Position


def distance(a: Position, b: Position) -> float:
    """Euclidean distance on the pitch plane."""
    return math.hypot(a.x - b.x, a.y - b.y)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation a + (b - a) * t."""
    return a + (b - a) * t


def lerp_position(a: Position, b: Position, t: float) -> Position:
    """Interpolate each axis independently."""
    return Position(lerp(a.x, b.x, t), lerp(a.y, b.y, t), lerp(a.z, b.z, t))


def point_segment_distance(point: Position, start: Position, end: Position) -> float:
    """Distance from point to the nearest point of the segment start-end."""
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return distance(point, start)

    # Projection parameter clamped onto the segment
    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    nearest = Position(start.x + t * dx, start.y + t * dy)
    return distance(point, nearest)


def polyline_distance(point: Position, points: Sequence[Position]) -> float:
    """Smallest distance from point to any segment of a polyline."""
    if not points:
        return math.inf
    if len(points) == 1:
        return distance(point, points[0])
    return min(
        point_segment_distance(point, points[i], points[i + 1])
        for i in range(len(points) - 1)
    )


def catmull_rom_path(points: Sequence[Position], samples: int) -> List[Position]:
    """
    Sample a uniform Catmull-Rom spline passing through every control point.

    The end points are duplicated as phantom controls so the curve starts and
    ends exactly on the first and last recorded points.

    Args:
        points: Control points in drawing order
        samples: Number of segments along the whole curve (output has samples + 1 points)

    Returns:
        Smoothed list of positions
    """
    if len(points) < 2:
        return list(points)
    samples = max(samples, 1)

    controls = np.array([(p.x, p.y, p.z) for p in points], dtype=float)
    padded = np.vstack([controls[0], controls, controls[-1]])
    n_segments = len(points) - 1

    path: List[Position] = []
    for i in range(samples + 1):
        u = i / samples * n_segments
        segment = min(int(u), n_segments - 1)
        t = u - segment
        p0, p1, p2, p3 = padded[segment:segment + 4]
        t2 = t * t
        t3 = t2 * t
        point = 0.5 * (
            (2 * p1)
            + (-p0 + p2) * t
            + (2 * p0 - 5 * p1 + 4 * p2 - p3) * t2
            + (-p0 + 3 * p1 - 3 * p2 + p3) * t3
        )
        path.append(Position(float(point[0]), float(point[1]), float(point[2])))

    return path


def bounding_box(points: Sequence[Position]) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of a point set."""
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return min(xs), min(ys), max(xs), max(ys)
