"""
Components

A live node in a Ui: the component's class instance, the core layout
attributes every component shares, its child IDs and its dirty flag.
Each component keeps its template so attributes can be re-resolved
without parsing again.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple, TYPE_CHECKING

from trellis.core.math2d import Vec2
from trellis.layout import ComponentFlow, Docking, compute_position, compute_size
from trellis.template.attributes import Attributes
from trellis.template.value import Coordinates

if TYPE_CHECKING:
    from trellis.classes.base import ComponentClass
    from trellis.events import EventSink
    from trellis.render.base import Renderer
    from trellis.scripting.runtime import ScriptRuntime
    from trellis.template.component import ComponentTemplate
    from trellis.template.template import Style
    from trellis.ui import Context


@dataclass
class ComponentAttributes:
    """Core attributes all components share."""
    position: Optional[Coordinates] = None
    size: Optional[Coordinates] = None
    docking: Tuple[Docking, Docking] = (Docking.START, Docking.START)
    margin: float = 0.0

    @staticmethod
    def load(attributes: Attributes, runtime: ScriptRuntime) -> ComponentAttributes:
        return ComponentAttributes(
            position=attributes.attribute_optional(
                "position", lambda v: v.as_coordinates(runtime)
            ),
            size=attributes.attribute_optional(
                "size", lambda v: v.as_coordinates(runtime)
            ),
            docking=attributes.attribute(
                "docking", lambda v: Docking.from_value(v, runtime),
                (Docking.START, Docking.START),
            ),
            margin=attributes.attribute(
                "margin", lambda v: v.as_float(runtime), 0.0
            ),
        )

    def compute_size(self, parent_size: Vec2) -> Vec2:
        return compute_size(self.size, parent_size)

    def compute_position(self, parent_size: Vec2, parent_flow: ComponentFlow) -> Vec2:
        size = self.compute_size(parent_size)
        return compute_position(
            self.position, self.docking, size, self.margin, parent_size, parent_flow,
        )


@dataclass
class PendingUpdate:
    """Freshly resolved attributes, not yet applied to a component."""
    attributes: Attributes
    component_attributes: ComponentAttributes


class Component:
    """
    A component generated from a template, active in a Ui.

    `children` is fixed at creation and mirrors the template's children,
    except for subtrees grafted on with Ui.insert_template.
    """

    def __init__(
        self,
        class_: ComponentClass,
        attributes: ComponentAttributes,
        template: ComponentTemplate,
        event_sink: EventSink,
    ):
        self.class_ = class_
        self.attributes = attributes
        self.template = template
        self.style_class: Optional[str] = template.style_class
        self.event_sink = event_sink
        self.children: List[int] = []
        self.needs_render_update = True

    @staticmethod
    def from_template(
        template: ComponentTemplate,
        event_sink: EventSink,
        style: Style,
        context: Context,
    ) -> Component:
        runtime = context.runtime
        attributes = Attributes.resolve(template, style, runtime)

        class_ = context.classes.create(template, attributes, runtime)
        component_attributes = ComponentAttributes.load(attributes, runtime)

        return Component(class_, component_attributes, template, event_sink)

    def resolve_attributes(self, style: Style, context: Context) -> Attributes:
        return Attributes.resolve(self.template, style, context.runtime)

    def prepare_update(self, style: Style, context: Context) -> PendingUpdate:
        """Resolve attributes without changing the component."""
        attributes = self.resolve_attributes(style, context)
        return PendingUpdate(attributes, ComponentAttributes.load(attributes, context.runtime))

    def apply_update(self, update: PendingUpdate, context: Context):
        # Dirty first, a failing class load still leaves the node redrawn
        self.needs_render_update = True
        self.class_.update_attributes(update.attributes, context.runtime)
        self.attributes = update.component_attributes

    def update_attributes(self, style: Style, context: Context):
        self.apply_update(self.prepare_update(style, context), context)

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def compute_size(self, parent_size: Vec2) -> Vec2:
        return self.attributes.compute_size(parent_size)

    def compute_position(self, parent_size: Vec2, parent_flow: ComponentFlow) -> Vec2:
        return self.attributes.compute_position(parent_size, parent_flow)

    # -------------------------------------------------------------------------
    # Rendering and Events
    # -------------------------------------------------------------------------

    def render(self, id: int, size: Vec2, renderer: Renderer):
        self.class_.render(id, self.attributes, size, renderer)

    def raise_hover_start_event(self):
        if self.class_.hover_start_event(self.event_sink):
            self.needs_render_update = True

    def raise_hover_end_event(self):
        if self.class_.hover_end_event(self.event_sink):
            self.needs_render_update = True

    def raise_pressed_event(self):
        self.class_.pressed_event(self.event_sink)

    @property
    def class_name(self) -> str:
        return self.template.class_name

    def __repr__(self) -> str:
        style = f".{self.style_class}" if self.style_class else ""
        return f"Component({self.class_name}{style}, children={self.children})"
