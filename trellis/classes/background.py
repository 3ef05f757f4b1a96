"""Background fill shared by the built-in classes."""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from trellis.core.math2d import Vec2
from trellis.render.shapes import rounded_rectangle
from trellis.template.value import Color

if TYPE_CHECKING:
    from trellis.render.base import Renderer
    from trellis.scripting.runtime import ScriptRuntime
    from trellis.template.attributes import Attributes


class BackgroundAttributes:
    """
    `color`, `color-hovering` and `border-radius`.

    Without a color nothing is drawn and the cursor passes through.
    """

    def __init__(
        self,
        color: Optional[Color] = None,
        color_hovering: Optional[Color] = None,
        border_radius: float = 0.0,
    ):
        self.color = color
        self.color_hovering = color_hovering
        self.border_radius = border_radius

    @staticmethod
    def load(attributes: Attributes, runtime: ScriptRuntime) -> BackgroundAttributes:
        return BackgroundAttributes(
            color=attributes.attribute_optional("color", lambda v: v.as_color(runtime)),
            color_hovering=attributes.attribute_optional(
                "color-hovering", lambda v: v.as_color(runtime)
            ),
            border_radius=attributes.attribute(
                "border-radius", lambda v: v.as_float(runtime), 0.0
            ),
        )

    def render(self, id: int, size: Vec2, renderer: Renderer, hovering: bool):
        color = self.color
        if hovering and self.color_hovering is not None:
            color = self.color_hovering
        if color is None:
            return

        if self.border_radius == 0.0:
            renderer.rectangle(id, Vec2(0.0, 0.0), size, color)
        else:
            vertices, indices = rounded_rectangle(Vec2(0.0, 0.0), size, self.border_radius)
            renderer.vertices(id, vertices, indices, color)

    def is_capturing_cursor(self) -> bool:
        return self.color is not None
