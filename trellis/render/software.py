"""
Software Renderer

CPU backend: caches are numpy float32 RGBA arrays with straight alpha,
shapes and text are rasterized into coverage masks with Pillow and
blended with the "over" operator.

Useful headless, for tests and for producing images of a UI.

Usage:
    renderer = SoftwareRenderer((320, 240))
    renderer.clear_target()
    render(renderer, ui)
    renderer.target_image().save("ui.png")
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import numpy as np
from PIL import Image, ImageDraw

from trellis.core.math2d import Vec2
from trellis.errors import RendererError
from trellis.render.base import Renderer
from trellis.render.fonts import load_font
from trellis.render.draw import DrawBatch, DrawCache, DrawMesh, DrawRect, DrawText
from trellis.template.value import Color, color_rgba, color_to_array

logger = logging.getLogger(__name__)


@dataclass
class SoftwareRendererConfig:
    font_path: Optional[str] = None     # None = Pillow's default font
    font_size: int = 14
    clear_color: Color = (0.0, 0.0, 0.0, 0.0)


class SoftwareRenderer(Renderer):
    """Renders component caches into an in-memory target."""

    def __init__(self, target_size: Tuple[int, int], config: SoftwareRendererConfig = None):
        self.config = config or SoftwareRendererConfig()
        self._caches: Dict[int, np.ndarray] = {}
        self._batches: Dict[int, DrawBatch] = {}
        self._font = load_font(self.config.font_path, self.config.font_size)
        self.target = self._new_surface(target_size)
        self.clear_target()

    # -------------------------------------------------------------------------
    # Target
    # -------------------------------------------------------------------------

    def set_target_size(self, size: Tuple[int, int]):
        self.target = self._new_surface(size)
        self.clear_target()

    def clear_target(self):
        self.target[:] = color_to_array(self.config.clear_color)

    def target_image(self) -> Image.Image:
        return _to_image(self.target)

    def cache_image(self, id: int) -> Image.Image:
        return _to_image(self._cache(id))

    def batch(self, id: int) -> DrawBatch:
        """Draw calls made into a cache since it was last cleared."""
        if id not in self._batches:
            raise RendererError(f"No cache for component {id}")
        return self._batches[id]

    def has_cache(self, id: int) -> bool:
        return id in self._caches

    # -------------------------------------------------------------------------
    # Caches
    # -------------------------------------------------------------------------

    def create_or_resize_cache(self, id: int, size: Tuple[int, int]) -> bool:
        w, h = size
        cache = self._caches.get(id)
        if cache is not None and cache.shape[:2] == (h, w):
            return False

        logger.debug(f"Cache {id} {'resized' if cache is not None else 'created'} to {w}x{h}")
        self._caches[id] = self._new_surface(size)
        self._batches[id] = DrawBatch()
        return True

    def clear_cache(self, id: int):
        self._cache(id)[:] = 0.0
        self._batches[id].clear()

    def remove_cache(self, id: int):
        self._caches.pop(id, None)
        self._batches.pop(id, None)

    def render_cache(self, target_id: int, source_id: int, position: Vec2):
        target = self._cache(target_id)
        _composite(target, self._cache(source_id), position)
        self._batches[target_id].add(DrawCache(source_id, position.x, position.y))

    def render_cache_to_target(self, id: int, position: Vec2):
        _composite(self.target, self._cache(id), position)

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def rectangle(self, id: int, position: Vec2, size: Vec2, color: Color):
        cache = self._cache(id)
        mask, draw = self._new_mask(cache)

        x0, y0 = int(round(position.x)), int(round(position.y))
        x1, y1 = int(round(position.x + size.x)) - 1, int(round(position.y + size.y)) - 1
        if x1 >= x0 and y1 >= y0:
            draw.rectangle([x0, y0, x1, y1], fill=255)
            _fill(cache, mask, color)

        self._batches[id].add(DrawRect(position.x, position.y, size.x, size.y, color))

    def text(self, id: int, text: str, position: Vec2, size: Vec2, color: Color):
        cache = self._cache(id)
        mask, draw = self._new_mask(cache)

        left, top, right, bottom = draw.textbbox((0, 0), text, font=self._font)
        x = position.x + (size.x - (right - left)) * 0.5 - left
        y = position.y + (size.y - (bottom - top)) * 0.5 - top
        draw.text((x, y), text, fill=255, font=self._font)
        _fill(cache, mask, color)

        self._batches[id].add(DrawText(text, position.x, position.y, size.x, size.y, color))

    def vertices(self, id: int, vertices: np.ndarray, indices: np.ndarray, color: Color):
        if len(indices) % 3 != 0:
            raise RendererError(f"Index count {len(indices)} is not a multiple of 3")

        cache = self._cache(id)
        mask, draw = self._new_mask(cache)

        for i in range(0, len(indices), 3):
            triangle = [tuple(float(c) for c in vertices[j]) for j in indices[i:i + 3]]
            draw.polygon(triangle, fill=255)
        _fill(cache, mask, color)

        self._batches[id].add(DrawMesh(vertices, indices, color))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _cache(self, id: int) -> np.ndarray:
        cache = self._caches.get(id)
        if cache is None:
            raise RendererError(f"No cache for component {id}")
        return cache

    @staticmethod
    def _new_surface(size: Tuple[int, int]) -> np.ndarray:
        w, h = size
        return np.zeros((h, w, 4), dtype=np.float32)

    @staticmethod
    def _new_mask(cache: np.ndarray):
        h, w = cache.shape[:2]
        mask = Image.new("L", (w, h), 0)
        return mask, ImageDraw.Draw(mask)


# =============================================================================
# Blending
# =============================================================================

def _fill(surface: np.ndarray, mask: Image.Image, color: Color):
    """Blend a solid color over a surface through a coverage mask."""
    rgba = color_to_array(color_rgba(color))
    coverage = np.asarray(mask, dtype=np.float32)[..., None] / 255.0
    _blend(surface, rgba[:3], coverage * rgba[3])


def _composite(dst: np.ndarray, src: np.ndarray, position: Vec2):
    """Blend `src` over `dst` with its top-left at `position`, clipped to `dst`."""
    x, y = int(round(position.x)), int(round(position.y))
    sh, sw = src.shape[:2]
    dh, dw = dst.shape[:2]

    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + sw, dw), min(y + sh, dh)
    if x1 <= x0 or y1 <= y0:
        return

    region = src[y0 - y:y1 - y, x0 - x:x1 - x]
    _blend(dst[y0:y1, x0:x1], region[..., :3], region[..., 3:4])


def _blend(dst: np.ndarray, src_rgb: np.ndarray, src_a: np.ndarray):
    """Straight-alpha "over", writes into `dst` in place."""
    dst_a = dst[..., 3:4]
    out_a = src_a + dst_a * (1.0 - src_a)
    safe_a = np.where(out_a > 0.0, out_a, 1.0)
    out_rgb = (src_rgb * src_a + dst[..., :3] * dst_a * (1.0 - src_a)) / safe_a

    dst[..., :3] = np.where(out_a > 0.0, out_rgb, 0.0)
    dst[..., 3:4] = out_a


def _to_image(surface: np.ndarray) -> Image.Image:
    data = np.clip(np.round(surface * 255.0), 0, 255).astype(np.uint8)
    return Image.fromarray(data)
