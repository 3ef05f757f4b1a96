from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from trellis.classes.background import BackgroundAttributes
from trellis.classes.base import ComponentClass
from trellis.core.math2d import Vec2
from trellis.template.value import Color, EventHook, color_from_u8

if TYPE_CHECKING:
    from trellis.component import ComponentAttributes
    from trellis.events import EventSink
    from trellis.render.base import Renderer
    from trellis.scripting.runtime import ScriptRuntime
    from trellis.template.attributes import Attributes

DEFAULT_TEXT_COLOR: Color = color_from_u8(0, 0, 0, 1.0)


class ButtonAttributes:
    """`text`, `text-color` and `on-pressed`."""

    def __init__(
        self,
        text: Optional[str] = None,
        text_color: Color = DEFAULT_TEXT_COLOR,
        on_pressed: Optional[EventHook] = None,
    ):
        self.text = text
        self.text_color = text_color
        self.on_pressed = on_pressed

    @staticmethod
    def load(attributes: Attributes, runtime: ScriptRuntime) -> ButtonAttributes:
        return ButtonAttributes(
            text=attributes.attribute_optional("text", lambda v: v.as_string(runtime)),
            text_color=attributes.attribute(
                "text-color", lambda v: v.as_color(runtime), DEFAULT_TEXT_COLOR
            ),
            on_pressed=attributes.attribute_optional(
                "on-pressed", lambda v: v.as_event_hook(runtime)
            ),
        )


class ButtonClass(ComponentClass):
    """
    A button, raises its `on-pressed` event when clicked.

    Always captures the cursor, and draws `color-hovering` instead of
    `color` while hovered.
    """

    def __init__(self, attributes: Attributes, runtime: ScriptRuntime):
        self.background = BackgroundAttributes.load(attributes, runtime)
        self.attributes = ButtonAttributes.load(attributes, runtime)
        self.hovering = False

    def update_attributes(self, attributes: Attributes, runtime: ScriptRuntime):
        background = BackgroundAttributes.load(attributes, runtime)
        self.attributes = ButtonAttributes.load(attributes, runtime)
        self.background = background

    def render(self, id: int, attributes: ComponentAttributes, size: Vec2, renderer: Renderer):
        self.background.render(id, size, renderer, self.hovering)

        if self.attributes.text is not None:
            renderer.text(id, self.attributes.text, Vec2(0.0, 0.0), size, self.attributes.text_color)

    def is_capturing_cursor(self) -> bool:
        return True

    def hover_start_event(self, event_sink: EventSink) -> bool:
        self.hovering = True
        return True

    def hover_end_event(self, event_sink: EventSink) -> bool:
        self.hovering = False
        return True

    def pressed_event(self, event_sink: EventSink):
        if self.attributes.on_pressed is not None:
            event_sink.raise_hook(self.attributes.on_pressed)
