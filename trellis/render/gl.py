"""
OpenGL Renderer

moderngl backend: every component cache is a texture with its own
framebuffer. Shapes are drawn with a flat colour program, caches and
text are composited with a textured blit.

Text is rasterized with Pillow and uploaded as a texture per draw.

Usage:
    renderer = GlRenderer(ctx, (width, height))

    # Each frame:
    renderer.clear_target()
    render(renderer, ui)
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import numpy as np
import moderngl
from PIL import Image, ImageDraw

from trellis.core.math2d import Vec2
from trellis.errors import RendererError
from trellis.render.base import Renderer
from trellis.render.fonts import load_font
from trellis.render.shapes import rectangle as rectangle_mesh
from trellis.template.value import Color, color_rgba

logger = logging.getLogger(__name__)


@dataclass
class GlRendererConfig:
    font_path: Optional[str] = None     # None = Pillow's default font
    font_size: int = 14
    clear_color: Color = (0.0, 0.0, 0.0, 1.0)


@dataclass
class _CacheTarget:
    """Texture and framebuffer backing one component's cache."""
    size: Tuple[int, int]
    texture: moderngl.Texture
    fbo: moderngl.Framebuffer

    def release(self):
        self.fbo.release()
        self.texture.release()


_COLOR_VS = """
#version 330

in vec2 in_pos;

uniform vec2 u_size;

void main() {
    vec2 ndc = (in_pos / u_size) * 2.0 - 1.0;
    ndc.y = -ndc.y;
    gl_Position = vec4(ndc, 0.0, 1.0);
}
"""

_COLOR_FS = """
#version 330

uniform vec4 u_color;

out vec4 frag_color;

void main() {
    frag_color = u_color;
}
"""

_BLIT_VS = """
#version 330

in vec2 in_pos;

out vec2 v_uv;

uniform vec2 u_size;
uniform vec4 u_rect;  // x, y, w, h in pixels (top-left origin)
uniform bool u_flip_v;

void main() {
    vec2 px = u_rect.xy + in_pos * u_rect.zw;
    vec2 ndc = (px / u_size) * 2.0 - 1.0;
    ndc.y = -ndc.y;
    gl_Position = vec4(ndc, 0.0, 1.0);

    // Framebuffer textures are stored bottom row first
    v_uv = u_flip_v ? vec2(in_pos.x, 1.0 - in_pos.y) : in_pos;
}
"""

_BLIT_FS = """
#version 330

in vec2 v_uv;

uniform sampler2D u_tex;
uniform vec4 u_tint;

out vec4 frag_color;

void main() {
    frag_color = texture(u_tex, v_uv) * u_tint;
}
"""


class GlRenderer(Renderer):
    """
    Renders component caches with moderngl.

    Args:
        ctx: ModernGL context
        target_size: Pixel size of the output target
        target: Framebuffer to composite the root into (None = screen)
    """

    def __init__(
        self,
        ctx: moderngl.Context,
        target_size: Tuple[int, int],
        target: moderngl.Framebuffer = None,
        config: GlRendererConfig = None,
    ):
        self.ctx = ctx
        self.config = config or GlRendererConfig()
        self.target = target or ctx.screen
        self.target_size = target_size

        self._caches: Dict[int, _CacheTarget] = {}
        self._font = load_font(self.config.font_path, self.config.font_size)

        self._color_prog = ctx.program(vertex_shader=_COLOR_VS, fragment_shader=_COLOR_FS)
        self._blit_prog = ctx.program(vertex_shader=_BLIT_VS, fragment_shader=_BLIT_FS)

        # Unit quad (0,0) to (1,1)
        quad = np.array([
            0, 0,  1, 0,  1, 1,
            0, 0,  1, 1,  0, 1,
        ], dtype=np.float32)
        self._blit_vbo = ctx.buffer(quad.tobytes())
        self._blit_vao = ctx.vertex_array(self._blit_prog, [(self._blit_vbo, "2f", "in_pos")])

    # -------------------------------------------------------------------------
    # Target
    # -------------------------------------------------------------------------

    def set_target_size(self, size: Tuple[int, int]):
        self.target_size = size

    def clear_target(self):
        self.target.use()
        self.target.clear(*color_rgba(self.config.clear_color))

    # -------------------------------------------------------------------------
    # Caches
    # -------------------------------------------------------------------------

    def create_or_resize_cache(self, id: int, size: Tuple[int, int]) -> bool:
        cache = self._caches.get(id)
        if cache is not None and cache.size == size:
            return False

        if cache is not None:
            cache.release()

        texture = self.ctx.texture(size, components=4, dtype="f1")
        texture.filter = (moderngl.LINEAR, moderngl.LINEAR)
        fbo = self.ctx.framebuffer(color_attachments=[texture])
        self._caches[id] = _CacheTarget(size, texture, fbo)

        logger.debug(f"Cache {id} allocated at {size[0]}x{size[1]}")
        return True

    def clear_cache(self, id: int):
        cache = self._cache(id)
        cache.fbo.use()
        cache.fbo.clear(0.0, 0.0, 0.0, 0.0)

    def remove_cache(self, id: int):
        cache = self._caches.pop(id, None)
        if cache is not None:
            cache.release()

    def render_cache(self, target_id: int, source_id: int, position: Vec2):
        target = self._cache(target_id)
        source = self._cache(source_id)
        target.fbo.use()
        self._blit(source.texture, position, Vec2(*source.size), target.size, True, (1.0, 1.0, 1.0, 1.0))

    def render_cache_to_target(self, id: int, position: Vec2):
        source = self._cache(id)
        self.target.use()
        self._blit(source.texture, position, Vec2(*source.size), self.target_size, True, (1.0, 1.0, 1.0, 1.0))

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def rectangle(self, id: int, position: Vec2, size: Vec2, color: Color):
        vertices, indices = rectangle_mesh(position, size)
        self.vertices(id, vertices, indices, color)

    def vertices(self, id: int, vertices: np.ndarray, indices: np.ndarray, color: Color):
        if len(indices) == 0:
            return
        cache = self._cache(id)
        cache.fbo.use()
        self._enable_blending()

        vbo = self.ctx.buffer(np.asarray(vertices, dtype=np.float32).tobytes())
        ibo = self.ctx.buffer(np.asarray(indices, dtype=np.uint16).tobytes())
        vao = self.ctx.vertex_array(
            self._color_prog, [(vbo, "2f", "in_pos")],
            index_buffer=ibo, index_element_size=2,
        )
        try:
            self._color_prog["u_size"].value = (float(cache.size[0]), float(cache.size[1]))
            self._color_prog["u_color"].value = color_rgba(color)
            vao.render(moderngl.TRIANGLES)
        finally:
            vao.release()
            ibo.release()
            vbo.release()

    def text(self, id: int, text: str, position: Vec2, size: Vec2, color: Color):
        cache = self._cache(id)
        area = (max(1, math.ceil(size.x)), max(1, math.ceil(size.y)))

        # White glyphs on transparent, tinted when blitted
        image = Image.new("RGBA", area, (255, 255, 255, 0))
        draw = ImageDraw.Draw(image)
        left, top, right, bottom = draw.textbbox((0, 0), text, font=self._font)
        x = (area[0] - (right - left)) * 0.5 - left
        y = (area[1] - (bottom - top)) * 0.5 - top
        draw.text((x, y), text, fill=(255, 255, 255, 255), font=self._font)

        texture = self.ctx.texture(image.size, components=4, data=image.tobytes())
        try:
            cache.fbo.use()
            self._blit(texture, position, Vec2(*area), cache.size, False, color_rgba(color))
        finally:
            texture.release()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _blit(
        self,
        texture: moderngl.Texture,
        position: Vec2,
        size: Vec2,
        viewport_size: Tuple[int, int],
        flip_v: bool,
        tint: Color,
    ):
        self._enable_blending()
        texture.use(location=0)
        self._blit_prog["u_tex"].value = 0
        self._blit_prog["u_size"].value = (float(viewport_size[0]), float(viewport_size[1]))
        self._blit_prog["u_rect"].value = (position.x, position.y, size.x, size.y)
        self._blit_prog["u_flip_v"].value = flip_v
        self._blit_prog["u_tint"].value = tint
        self._blit_vao.render(moderngl.TRIANGLES)

    def _enable_blending(self):
        self.ctx.enable(moderngl.BLEND)
        self.ctx.blend_func = (
            moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA,
            moderngl.ONE, moderngl.ONE_MINUS_SRC_ALPHA,
        )

    def _cache(self, id: int) -> _CacheTarget:
        cache = self._caches.get(id)
        if cache is None:
            raise RendererError(f"No cache for component {id}")
        return cache

    def release(self):
        """Release GPU resources."""
        for cache in self._caches.values():
            cache.release()
        self._caches.clear()
        self._blit_vao.release()
        self._blit_vbo.release()
        self._blit_prog.release()
        self._color_prog.release()
