"""
Rendering: the render-cache driver and its backends.

The moderngl backend lives in `trellis.render.gl` and is imported
explicitly, it needs the `gl` extra.
"""

from trellis.render.base import Renderer
from trellis.render.driver import render, RenderStats
from trellis.render.draw import DrawBatch, DrawCache, DrawCommand, DrawMesh, DrawRect, DrawText
from trellis.render.shapes import rounded_rectangle, rectangle
from trellis.render.software import SoftwareRenderer, SoftwareRendererConfig

__all__ = [
    "Renderer",
    "render", "RenderStats",
    "DrawBatch", "DrawCache", "DrawCommand", "DrawMesh", "DrawRect", "DrawText",
    "rounded_rectangle", "rectangle",
    "SoftwareRenderer", "SoftwareRendererConfig",
]
