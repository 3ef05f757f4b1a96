"""
Attribute Resolution

Flattens a component template and the style rules for its class into
one key -> value mapping. Style values go in first, the template's own
attributes override them, and within each the last occurrence wins.
"""

from __future__ import annotations
from typing import Callable, Dict, Iterator, Optional, Tuple, TypeVar, TYPE_CHECKING

from trellis.errors import ComponentAttributeError, TrellisError
from trellis.template.component import ComponentTemplate, TemplateAttribute
from trellis.template.value import TemplateValue

if TYPE_CHECKING:
    from trellis.scripting.runtime import ScriptRuntime
    from trellis.template.template import Style

T = TypeVar("T")


class Attributes:
    """
    Resolved attributes of one component.

    Tagged with the component's class and source line so coercion errors
    can say where they came from.
    """

    def __init__(self, values: Dict[str, TemplateValue], component_class: str, component_line: int):
        self._values = values
        self.component_class = component_class
        self.component_line = component_line

    @staticmethod
    def resolve(template: ComponentTemplate, style: Style, runtime: ScriptRuntime) -> Attributes:
        values: Dict[str, TemplateValue] = {}
        attributes = Attributes(values, template.class_name, template.line)

        for rule in style.rules_for(template.class_name):
            for attribute in rule.attributes:
                if attributes._check(attribute, runtime):
                    values[attribute.key] = attribute.value

        for attribute in template.attributes:
            if attributes._check(attribute, runtime):
                values[attribute.key] = attribute.value

        return attributes

    def _check(self, attribute: TemplateAttribute, runtime: ScriptRuntime) -> bool:
        try:
            return attribute.check_conditional(runtime)
        except TrellisError as e:
            raise self._wrap(attribute.key, e) from e

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def get(self, key: str) -> Optional[TemplateValue]:
        """The raw value for a key, `_` included, or None."""
        return self._values.get(key)

    def attribute(self, key: str, read: Callable[[TemplateValue], T], default: T) -> T:
        """Read an attribute, falling back to `default` when absent or `_`."""
        value = self.attribute_optional(key, read)
        return default if value is None else value

    def attribute_optional(self, key: str, read: Callable[[TemplateValue], T]) -> Optional[T]:
        """Read an attribute, None when absent or `_`."""
        value = self._values.get(key)
        if value is None or value.is_default:
            return None
        try:
            return read(value)
        except TrellisError as e:
            raise self._wrap(key, e) from e

    def _wrap(self, key: str, error: TrellisError) -> ComponentAttributeError:
        return ComponentAttributeError(self.component_class, self.component_line, key, error)

    def items(self) -> Iterator[Tuple[str, TemplateValue]]:
        return iter(self._values.items())

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Attributes):
            return NotImplemented
        return (
            self._values == other._values
            and self.component_class == other.component_class
            and self.component_line == other.component_line
        )

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}: {v.to_markup()}" for k, v in sorted(self._values.items()))
        return f"Attributes({self.component_class}@{self.component_line} {{ {inner} }})"
