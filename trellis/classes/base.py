"""
Component Classes

The behavior a component gets from its class: how it reads its
attributes, how it renders itself and how it reacts to the cursor.
New classes are registered by name with a ComponentClasses registry,
which the tree builder consults for every template.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, TYPE_CHECKING

from trellis.core.math2d import Vec2
from trellis.errors import ClassNotRegisteredError

if TYPE_CHECKING:
    from trellis.component import ComponentAttributes
    from trellis.events import EventSink
    from trellis.render.base import Renderer
    from trellis.scripting.runtime import ScriptRuntime
    from trellis.template.attributes import Attributes
    from trellis.template.component import ComponentTemplate

logger = logging.getLogger(__name__)


class ComponentClass(ABC):
    """
    Base class for component behaviors.

    Subclasses are constructed with `(attributes, runtime)` and must
    re-derive all of their state in update_attributes.
    """

    @abstractmethod
    def update_attributes(self, attributes: Attributes, runtime: ScriptRuntime):
        """Reload internal state from freshly resolved attributes."""

    @abstractmethod
    def render(self, id: int, attributes: ComponentAttributes, size: Vec2, renderer: Renderer):
        """Draw this component into its cache, `size` is its computed size."""

    def is_capturing_cursor(self) -> bool:
        """If this component can be hovered and pressed. Does not affect children."""
        return False

    def hover_start_event(self, event_sink: EventSink) -> bool:
        """Cursor started hovering. Returns True if this needs a redraw."""
        return False

    def hover_end_event(self, event_sink: EventSink) -> bool:
        """Cursor stopped hovering. Returns True if this needs a redraw."""
        return False

    def pressed_event(self, event_sink: EventSink):
        """Component was clicked or tapped."""
        pass


ComponentClassFactory = Callable[["Attributes", "ScriptRuntime"], ComponentClass]


class ComponentClasses:
    """
    Registry of component class factories by name.

    Usage:
        classes = ComponentClasses()
        classes.register("button", ButtonClass)
    """

    def __init__(self):
        self._factories: Dict[str, ComponentClassFactory] = {}

    @staticmethod
    def with_defaults() -> ComponentClasses:
        """A registry with the built-in `container` and `button` classes."""
        from trellis.classes.button import ButtonClass
        from trellis.classes.container import ContainerClass

        classes = ComponentClasses()
        classes.register("container", ContainerClass)
        classes.register("button", ButtonClass)
        return classes

    def register(self, class_name: str, factory: ComponentClassFactory):
        if class_name in self._factories:
            logger.debug(f"Replacing component class: {class_name}")
        self._factories[class_name] = factory

    def create(
        self, template: ComponentTemplate, attributes: Attributes, runtime: ScriptRuntime,
    ) -> ComponentClass:
        """Create the class instance the template asks for."""
        factory = self._factories.get(template.class_name)
        if factory is None:
            raise ClassNotRegisteredError(template.class_name)
        return factory(attributes, runtime)

    @property
    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, class_name: object) -> bool:
        return class_name in self._factories
