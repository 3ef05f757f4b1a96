"""Markup documents, values and attribute resolution."""

from trellis.template.value import (
    TemplateValue, ValueKind, Coordinate, Coordinates, EventHook, HookKind,
    Color, color_rgba, color_to_array, color_from_u8,
)
from trellis.template.component import ComponentTemplate, TemplateAttribute
from trellis.template.parse import parse_document, INDENT_WIDTH, TAB_WIDTH
from trellis.template.template import Template, Style
from trellis.template.attributes import Attributes

__all__ = [
    "TemplateValue", "ValueKind", "Coordinate", "Coordinates", "EventHook", "HookKind",
    "Color", "color_rgba", "color_to_array", "color_from_u8",
    "ComponentTemplate", "TemplateAttribute",
    "parse_document", "INDENT_WIDTH", "TAB_WIDTH",
    "Template", "Style",
    "Attributes",
]
