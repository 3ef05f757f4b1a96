"""
Template and Style documents.

A Template has exactly one root component. A Style is a flat list of
rules, each naming the component class its attributes apply to.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, TextIO, Union

from trellis.errors import ParseError
from trellis.template.component import ComponentTemplate
from trellis.template.parse import parse_document


class Template:
    """
    Defines how a group of components is laid out and initialized from
    model data.

    Usage:
        template = Template.from_str("root\\n    child\\n")
        template.root.children[0].class_name  # "child"
    """

    def __init__(self, root: ComponentTemplate):
        self.root = root

    @staticmethod
    def from_str(text: str) -> Template:
        document = parse_document(text)
        if len(document) == 0:
            raise ParseError("No component found in template")
        if len(document) > 1:
            raise ParseError(
                "More than one root component found in template, only one allowed",
                document[1].line,
            )
        return Template(document[0])

    @staticmethod
    def from_reader(reader: TextIO) -> Template:
        return Template.from_str(reader.read())

    @staticmethod
    def from_file(path: Union[str, Path]) -> Template:
        with open(path, "r", encoding="utf-8") as f:
            return Template.from_reader(f)

    def to_markup(self) -> str:
        return self.root.to_markup()

    def __repr__(self) -> str:
        return f"Template(root={self.root.class_name!r})"


class Style:
    """Default attribute values for component classes."""

    def __init__(self, components: List[ComponentTemplate] = None):
        self.components: List[ComponentTemplate] = list(components or [])

    @staticmethod
    def from_str(text: str) -> Style:
        return Style(parse_document(text))

    @staticmethod
    def from_reader(reader: TextIO) -> Style:
        return Style.from_str(reader.read())

    @staticmethod
    def from_file(path: Union[str, Path]) -> Style:
        with open(path, "r", encoding="utf-8") as f:
            return Style.from_reader(f)

    def rules_for(self, class_name: str) -> List[ComponentTemplate]:
        """Rules targeting the given component class, in declaration order."""
        return [c for c in self.components if c.class_name == class_name]

    def to_markup(self) -> str:
        return "".join(c.to_markup() for c in self.components)

    def __repr__(self) -> str:
        return f"Style({len(self.components)} rules)"
