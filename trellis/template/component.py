"""
Component Templates

The parsed, unresolved description of one component and its subtree.
Templates are immutable: parse once, instantiate as often as needed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, TYPE_CHECKING

from trellis.template.value import TemplateValue

if TYPE_CHECKING:
    from trellis.scripting.runtime import ScriptRuntime

INDENT = "    "


@dataclass(frozen=True)
class TemplateAttribute:
    """An attribute-value-conditional combination in a component template."""
    key: str
    value: TemplateValue
    conditional: Optional[str] = None

    def check_conditional(self, runtime: ScriptRuntime) -> bool:
        if self.conditional is None:
            return True
        return runtime.eval_bool(self.conditional)

    def to_markup(self) -> str:
        text = f"{self.key}: {self.value.to_markup()}"
        if self.conditional is not None:
            text += f" ?{{{self.conditional}}}"
        return text


@dataclass(frozen=True)
class ComponentTemplate:
    """
    A template for a component.

    `attributes` keeps declaration order and may repeat keys, the last
    occurrence wins when attributes are resolved.
    """
    class_name: str
    style_class: Optional[str] = None
    attributes: Tuple[TemplateAttribute, ...] = ()
    children: Tuple[ComponentTemplate, ...] = ()
    line: int = 0

    def shape(self) -> tuple:
        """Class names and nesting, without attributes or lines."""
        return (self.class_name, tuple(child.shape() for child in self.children))

    def to_markup(self, depth: int = 0) -> str:
        """Format this component and its children as markup text."""
        lines: List[str] = []
        self._write_markup(depth, lines)
        return "\n".join(lines) + "\n"

    def _write_markup(self, depth: int, lines: List[str]):
        text = INDENT * depth + self.class_name
        if self.style_class is not None:
            text += f".{self.style_class}"
        if self.attributes:
            text += " { " + ", ".join(a.to_markup() for a in self.attributes) + " }"
        lines.append(text)
        for child in self.children:
            child._write_markup(depth + 1, lines)


@dataclass
class _PendingComponent:
    """A component still collecting children while the parser walks the document."""
    class_name: str
    style_class: Optional[str]
    attributes: List[TemplateAttribute]
    line: int
    children: List[_PendingComponent] = field(default_factory=list)

    def build(self) -> ComponentTemplate:
        return ComponentTemplate(
            class_name=self.class_name,
            style_class=self.style_class,
            attributes=tuple(self.attributes),
            children=tuple(child.build() for child in self.children),
            line=self.line,
        )
