"""
Shape tessellation for backgrounds.

Produces triangle meshes in the form Renderer.vertices() accepts.
"""

from __future__ import annotations
import math
from typing import Tuple
import numpy as np

from trellis.core.math2d import Vec2

# Maximum distance between the true arc and its polygon, in pixels
DEFAULT_TOLERANCE = 0.1


def rounded_rectangle(
    position: Vec2,
    size: Vec2,
    radius: float,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Tessellate a rectangle with equally rounded corners.

    The radius is clamped to half the shorter side. The result is a fan
    around the rectangle's center.

    Returns:
        (vertices, indices): (N, 2) float32 and (M,) uint16
    """
    radius = max(0.0, min(radius, size.x * 0.5, size.y * 0.5))
    segments = _arc_segments(radius, tolerance)

    x0, y0 = position.x, position.y
    x1, y1 = position.x + size.x, position.y + size.y

    # Corner centers clockwise from top-left, with the angle each arc starts at
    corners = [
        (x0 + radius, y0 + radius, math.pi),
        (x1 - radius, y0 + radius, math.pi * 1.5),
        (x1 - radius, y1 - radius, 0.0),
        (x0 + radius, y1 - radius, math.pi * 0.5),
    ]

    points = [(x0 + size.x * 0.5, y0 + size.y * 0.5)]
    for cx, cy, start in corners:
        for i in range(segments + 1):
            angle = start + (math.pi * 0.5) * (i / segments)
            points.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))

    outline = len(points) - 1
    indices = []
    for i in range(outline):
        indices.extend((0, 1 + i, 1 + (i + 1) % outline))

    return np.array(points, dtype=np.float32), np.array(indices, dtype=np.uint16)


def rectangle(position: Vec2, size: Vec2) -> Tuple[np.ndarray, np.ndarray]:
    """Two triangles covering a rectangle."""
    x0, y0 = position.x, position.y
    x1, y1 = position.x + size.x, position.y + size.y
    vertices = np.array([(x0, y0), (x1, y0), (x1, y1), (x0, y1)], dtype=np.float32)
    indices = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint16)
    return vertices, indices


def _arc_segments(radius: float, tolerance: float) -> int:
    if radius <= tolerance:
        return 1
    # Angle per segment keeping the chord within tolerance of the arc
    step = 2.0 * math.acos(1.0 - tolerance / radius)
    return max(2, math.ceil((math.pi * 0.5) / step))
