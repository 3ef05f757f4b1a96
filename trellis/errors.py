"""
Errors

Every failure raised by the engine derives from TrellisError.

- ParseError: malformed template or style text, addressed by line
- TemplateValueError: a value has the wrong shape or is out of range
- ScriptError: the script runtime failed or returned the wrong type
- ComponentAttributeError: one of the above, attributed to a component
- ClassNotRegisteredError: a template names an unknown component class
- StyleClassNotFoundError: no component carries the requested style class
- RendererError: a rendering backend failed
"""

from __future__ import annotations
from typing import Optional


class TrellisError(Exception):
    """Base class for all engine errors."""
    pass


class ParseError(TrellisError):
    """Raised when template or style markup cannot be parsed."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        if self.column is None:
            return f"{self.message} at line {self.line}"
        return f"{self.message} at line {self.line}, column {self.column}"


class TemplateValueError(TrellisError):
    """Raised when a template value cannot be coerced to the requested type."""

    def __init__(self, message: str, inner: Optional[TrellisError] = None):
        self.message = message
        self.inner = inner
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.inner is None:
            return self.message
        return f"{self.message}: {self.inner}"


class ScriptError(TrellisError):
    """Raised when the script runtime fails to evaluate a source string."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.source is None:
            return self.message
        return f"{self.message} (in script {self.source!r})"


class ComponentAttributeError(TrellisError):
    """Raised when a component's attribute fails to resolve."""

    def __init__(self, component: str, line: int, field: str, inner: TrellisError):
        self.component = component
        self.line = line
        self.field = field
        self.inner = inner
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"Attribute \"{self.field}\" of component \"{self.component}\" "
            f"at line {self.line}: {self.inner}"
        )


class ClassNotRegisteredError(TrellisError):
    """Raised when a template uses a component class nobody registered."""

    def __init__(self, class_name: str):
        self.class_name = class_name
        super().__init__(f"Component class \"{class_name}\" was not registered")


class StyleClassNotFoundError(TrellisError):
    """Raised when inserting under a style class no component has."""

    def __init__(self, style_class: str):
        self.style_class = style_class
        super().__init__(f"Unable to find component with style class \"{style_class}\"")


class RendererError(TrellisError):
    """Raised by rendering backends."""
    pass
