"""
Renderer Capability

What a backend must provide for the render-cache driver. Every
component owns one persistent off-screen cache, addressed by its ID.
Draw calls target a cache; caches are composited into their parent's
cache and finally the root's cache into the output target.

All positions and sizes are in pixels, top-left origin.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Tuple
import numpy as np

from trellis.core.math2d import Vec2
from trellis.template.value import Color


class Renderer(ABC):
    """Backend implementing how individual rendering operations are done."""

    @abstractmethod
    def create_or_resize_cache(self, id: int, size: Tuple[int, int]) -> bool:
        """
        Make sure the cache for `id` exists with the given pixel size.

        Returns True if the cache was just created or resized, and so
        holds nothing.
        """

    @abstractmethod
    def clear_cache(self, id: int):
        """Clear the cache to fully transparent."""

    @abstractmethod
    def render_cache(self, target_id: int, source_id: int, position: Vec2):
        """Composite the source cache into the target cache at a position."""

    @abstractmethod
    def render_cache_to_target(self, id: int, position: Vec2):
        """Composite a cache into the output target."""

    @abstractmethod
    def rectangle(self, id: int, position: Vec2, size: Vec2, color: Color):
        """Fill a rectangle in the cache."""

    @abstractmethod
    def text(self, id: int, text: str, position: Vec2, size: Vec2, color: Color):
        """Draw text centered in an area of the cache."""

    @abstractmethod
    def vertices(self, id: int, vertices: np.ndarray, indices: np.ndarray, color: Color):
        """
        Fill triangles in the cache.

        Args:
            vertices: (N, 2) float32 positions
            indices: (M,) uint16, three per triangle
        """

    def remove_cache(self, id: int):
        """Drop the cache for a component that no longer exists."""
        pass
