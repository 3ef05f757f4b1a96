# trellis/core/math2d.py
"""
Core 2D math types for layout and hit-testing.
All values are in pixels, top-left origin.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Tuple


# =============================================================================
# Vector
# =============================================================================

@dataclass
class Vec2:
    """2D vector for positions and sizes."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vec2:
        return self.__mul__(scalar)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def ceil(self) -> Tuple[int, int]:
        """Integer pixel extent covering this size, at least 1x1."""
        return (max(1, math.ceil(self.x)), max(1, math.ceil(self.y)))

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


# =============================================================================
# Rect
# =============================================================================

@dataclass
class Rect:
    """Rectangle with position and size."""
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    @staticmethod
    def from_position_size(position: Vec2, size: Vec2) -> Rect:
        return Rect(position.x, position.y, size.x, size.y)

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < (self.x + self.w) and self.y <= py < (self.y + self.h)

    @property
    def position(self) -> Vec2:
        return Vec2(self.x, self.y)

    @property
    def size(self) -> Vec2:
        return Vec2(self.w, self.h)
