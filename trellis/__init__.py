"""
Trellis

Declarative UI templates: indentation-based markup parsed into component
trees, styled through a cascade, laid out and rendered through per-component
caches so only what changed is redrawn.

Components:
- template: Markup parser, values, Template/Style documents, attribute resolution
- scripting: Script runtime capability and the model it evaluates against
- classes: Component class capability, registry, built-in container and button
- ui: Component tree, inserted templates, model and style updates
- layout: Docking and automatic flow placement
- input: Hit-testing, hover and press routing
- render: Render-cache driver, software backend, moderngl backend

Example usage:

    from trellis import Context, Template, Style, Ui, Input, Vec2, ScriptTable
    from trellis.render import SoftwareRenderer, render

    context = Context.default()
    template = Template.from_str(
        "container { color: (40, 40, 40) }\\n"
        "    button { size: (120, 30), text: \\"Go\\", on-pressed: \\"go\\" }\\n"
    )
    ui = Ui(template, Style(), Vec2(320, 240), context)

    # Input from the host's event loop
    ui_input = Input()
    ui_input.handle_cursor_moved(Vec2(10, 10), ui)
    ui_input.handle_drag_ended(Vec2(10, 10), ui)
    ui.tree.event_sink.next()   # "go"

    # Each frame:
    renderer = SoftwareRenderer((320, 240))
    render(renderer, ui)
"""

from trellis.core.math2d import Vec2, Rect
from trellis.errors import (
    TrellisError, ParseError, TemplateValueError, ScriptError,
    ComponentAttributeError, ClassNotRegisteredError, StyleClassNotFoundError,
    RendererError,
)
from trellis.template import (
    Template, Style, ComponentTemplate, TemplateAttribute, TemplateValue,
    Coordinate, Coordinates, EventHook, Attributes, Color,
)
from trellis.scripting import ScriptRuntime, PythonScriptRuntime, ScriptRuntimeConfig, ScriptTable
from trellis.classes import (
    ComponentClass, ComponentClasses, BackgroundAttributes, ContainerClass, ButtonClass,
)
from trellis.layout import Docking, ComponentFlow
from trellis.component import Component, ComponentAttributes
from trellis.events import EventSink
from trellis.ui import Ui, Context, ComponentId, Tree
from trellis.input import Input, find_at_position

__all__ = [
    # Math
    "Vec2", "Rect",
    # Errors
    "TrellisError", "ParseError", "TemplateValueError", "ScriptError",
    "ComponentAttributeError", "ClassNotRegisteredError", "StyleClassNotFoundError",
    "RendererError",
    # Templates
    "Template", "Style", "ComponentTemplate", "TemplateAttribute", "TemplateValue",
    "Coordinate", "Coordinates", "EventHook", "Attributes", "Color",
    # Scripting
    "ScriptRuntime", "PythonScriptRuntime", "ScriptRuntimeConfig", "ScriptTable",
    # Classes
    "ComponentClass", "ComponentClasses", "BackgroundAttributes", "ContainerClass", "ButtonClass",
    # Tree
    "Docking", "ComponentFlow", "Component", "ComponentAttributes",
    "EventSink", "Ui", "Context", "ComponentId", "Tree",
    # Input
    "Input", "find_at_position",
]

__version__ = "0.1.0"
