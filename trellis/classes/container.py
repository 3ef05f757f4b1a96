from __future__ import annotations
from typing import TYPE_CHECKING

from trellis.classes.background import BackgroundAttributes
from trellis.classes.base import ComponentClass
from trellis.core.math2d import Vec2

if TYPE_CHECKING:
    from trellis.component import ComponentAttributes
    from trellis.render.base import Renderer
    from trellis.scripting.runtime import ScriptRuntime
    from trellis.template.attributes import Attributes


class ContainerClass(ComponentClass):
    """Generic container for other components, draws an optional background."""

    def __init__(self, attributes: Attributes, runtime: ScriptRuntime):
        self.background = BackgroundAttributes.load(attributes, runtime)

    def update_attributes(self, attributes: Attributes, runtime: ScriptRuntime):
        self.background = BackgroundAttributes.load(attributes, runtime)

    def render(self, id: int, attributes: ComponentAttributes, size: Vec2, renderer: Renderer):
        self.background.render(id, size, renderer, False)

    def is_capturing_cursor(self) -> bool:
        return self.background.is_capturing_cursor()
