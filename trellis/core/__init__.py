"""Core value types shared by layout, input and rendering."""

from trellis.core.math2d import Vec2, Rect

__all__ = ["Vec2", "Rect"]
