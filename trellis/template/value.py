"""
Template Values

Literal values parsed from markup, and the coercions components use to
read them.

A value is either fully literal (string, integer, float, percentage,
tuple, default) or carries unevaluated script source. Only script values
reach the script runtime, and only when a coercion asks for them.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, Tuple, Union, TYPE_CHECKING
import numpy as np

from trellis.core.math2d import Vec2
from trellis.errors import TemplateValueError, TrellisError

if TYPE_CHECKING:
    from trellis.scripting.runtime import ScriptRuntime


# =============================================================================
# Color
# =============================================================================

# RGBA, each channel 0.0-1.0
Color = Tuple[float, float, float, float]


def color_rgba(c: Optional[Tuple[float, ...]]) -> Color:
    """Normalize color to RGBA tuple."""
    if c is None:
        return (0.0, 0.0, 0.0, 0.0)
    if len(c) == 3:
        return (c[0], c[1], c[2], 1.0)
    return (c[0], c[1], c[2], c[3])


def color_to_array(c: Optional[Tuple[float, ...]]) -> np.ndarray:
    """Convert color to numpy array."""
    return np.array(color_rgba(c), dtype=np.float32)


def color_from_u8(r: int, g: int, b: int, a: float = 1.0) -> Color:
    return (r / 255.0, g / 255.0, b / 255.0, a)


# =============================================================================
# Coordinates
# =============================================================================

@dataclass(frozen=True)
class Coordinate:
    """
    A single coordinate, either exact pixels or relative to the parent.

    Relative coordinates come from percentage literals and hold a
    fraction in 0.0-1.0.
    """
    value: float = 0.0
    relative: bool = False

    @staticmethod
    def exact(value: float) -> Coordinate:
        return Coordinate(float(value), False)

    @staticmethod
    def relative_to_parent(fraction: float) -> Coordinate:
        return Coordinate(float(fraction), True)

    def resolve(self, parent_extent: float) -> float:
        """Resolve to pixels given the parent's extent on this axis."""
        if self.relative:
            return self.value * parent_extent
        return self.value


@dataclass(frozen=True)
class Coordinates:
    """An (x, y) pair of coordinates."""
    x: Coordinate
    y: Coordinate

    def to_vec(self, parent_size: Vec2) -> Vec2:
        return Vec2(self.x.resolve(parent_size.x), self.y.resolve(parent_size.y))


# =============================================================================
# Event Hooks
# =============================================================================

class HookKind(Enum):
    DIRECT = auto()   # Raise the named event
    SCRIPT = auto()   # Run a statement when raised


@dataclass(frozen=True)
class EventHook:
    """What to raise when a component fires an event."""
    kind: HookKind
    value: str

    @staticmethod
    def direct(name: str) -> EventHook:
        return EventHook(HookKind.DIRECT, name)

    @staticmethod
    def script(source: str) -> EventHook:
        return EventHook(HookKind.SCRIPT, source)


# =============================================================================
# Template Value
# =============================================================================

class ValueKind(Enum):
    STRING = auto()
    INTEGER = auto()
    FLOAT = auto()
    PERCENTAGE = auto()
    TUPLE = auto()
    DEFAULT = auto()            # `_`, treated as absent
    SCRIPT_VALUE = auto()       # `#{...}`, evaluated on coercion
    SCRIPT_STATEMENT = auto()   # `${...}`, run when an event fires


@dataclass(frozen=True)
class TemplateValue:
    """
    A value given to an attribute in markup.

    Immutable and compared structurally. Build with the of_* constructors.
    """
    kind: ValueKind
    data: Any = None

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @staticmethod
    def of_string(value: str) -> TemplateValue:
        return TemplateValue(ValueKind.STRING, value)

    @staticmethod
    def of_integer(value: int) -> TemplateValue:
        return TemplateValue(ValueKind.INTEGER, int(value))

    @staticmethod
    def of_float(value: float) -> TemplateValue:
        return TemplateValue(ValueKind.FLOAT, float(value))

    @staticmethod
    def of_percentage(value: Union[int, float]) -> TemplateValue:
        return TemplateValue(ValueKind.PERCENTAGE, value)

    @staticmethod
    def of_tuple(*values: TemplateValue) -> TemplateValue:
        return TemplateValue(ValueKind.TUPLE, tuple(values))

    @staticmethod
    def default() -> TemplateValue:
        return TemplateValue(ValueKind.DEFAULT)

    @staticmethod
    def of_script(source: str) -> TemplateValue:
        return TemplateValue(ValueKind.SCRIPT_VALUE, source)

    @staticmethod
    def of_statement(source: str) -> TemplateValue:
        return TemplateValue(ValueKind.SCRIPT_STATEMENT, source)

    @property
    def is_default(self) -> bool:
        return self.kind == ValueKind.DEFAULT

    @property
    def is_script(self) -> bool:
        return self.kind in (ValueKind.SCRIPT_VALUE, ValueKind.SCRIPT_STATEMENT)

    # -------------------------------------------------------------------------
    # Coercions
    # -------------------------------------------------------------------------

    def as_string(self, runtime: ScriptRuntime) -> str:
        if self.kind == ValueKind.STRING:
            return self.data
        if self.kind == ValueKind.SCRIPT_VALUE:
            return runtime.eval_string(self.data)
        raise TemplateValueError("Value is not a string")

    def as_integer(self, runtime: ScriptRuntime) -> int:
        if self.kind == ValueKind.INTEGER:
            return self.data
        if self.kind == ValueKind.SCRIPT_VALUE:
            return runtime.eval_integer(self.data)
        raise TemplateValueError("Value is not an integer")

    def as_float(self, runtime: ScriptRuntime) -> float:
        if self.kind in (ValueKind.FLOAT, ValueKind.INTEGER):
            return float(self.data)
        if self.kind == ValueKind.SCRIPT_VALUE:
            return runtime.eval_float(self.data)
        raise TemplateValueError("Value is not a float")

    def as_float_or_percentage(self, percent_100: float, runtime: ScriptRuntime) -> float:
        """Read a float, or a percentage of `percent_100`."""
        if self.kind == ValueKind.PERCENTAGE:
            return (self.data / 100.0) * percent_100
        if self.kind in (ValueKind.FLOAT, ValueKind.INTEGER, ValueKind.SCRIPT_VALUE):
            return self.as_float(runtime)
        raise TemplateValueError("Value is not a float or percentage")

    def as_tuple(self) -> Tuple[TemplateValue, ...]:
        if self.kind == ValueKind.TUPLE:
            return self.data
        raise TemplateValueError("Value is not a tuple")

    def as_vector(self, percent_100: Vec2, runtime: ScriptRuntime) -> Vec2:
        values = self._sized_tuple(2)
        x = _indexed(1, lambda: values[0].as_float_or_percentage(percent_100.x, runtime))
        y = _indexed(2, lambda: values[1].as_float_or_percentage(percent_100.y, runtime))
        return Vec2(x, y)

    def as_coordinate(self, runtime: ScriptRuntime) -> Coordinate:
        if self.kind == ValueKind.PERCENTAGE:
            _check_range(self.data, 0, 100, "%")
            return Coordinate.relative_to_parent(self.data / 100.0)
        if self.kind in (ValueKind.FLOAT, ValueKind.INTEGER, ValueKind.SCRIPT_VALUE):
            return Coordinate.exact(self.as_float(runtime))
        raise TemplateValueError("Value is not a coordinate")

    def as_coordinates(self, runtime: ScriptRuntime) -> Coordinates:
        values = self._sized_tuple(2)
        x = _indexed(1, lambda: values[0].as_coordinate(runtime))
        y = _indexed(2, lambda: values[1].as_coordinate(runtime))
        return Coordinates(x, y)

    def as_color(self, runtime: ScriptRuntime) -> Color:
        """Read an (r, g, b) or (r, g, b, a) tuple, channels 0-255, alpha 0.0-1.0."""
        values = self.as_tuple()
        if len(values) not in (3, 4):
            raise TemplateValueError("Tuple is incorrect size")

        channels = []
        for i in range(3):
            channel = _indexed(i + 1, lambda: values[i].as_integer(runtime))
            _indexed(i + 1, lambda: _check_range(channel, 0, 255))
            channels.append(channel)

        alpha = 1.0
        if len(values) == 4:
            alpha = _indexed(4, lambda: values[3].as_float(runtime))
            _indexed(4, lambda: _check_range(alpha, 0.0, 1.0))

        return color_from_u8(channels[0], channels[1], channels[2], alpha)

    def as_event_hook(self, runtime: ScriptRuntime) -> EventHook:
        if self.kind == ValueKind.STRING:
            return EventHook.direct(self.data)
        if self.kind == ValueKind.SCRIPT_VALUE:
            return EventHook.direct(runtime.eval_string(self.data))
        if self.kind == ValueKind.SCRIPT_STATEMENT:
            return EventHook.script(self.data)
        raise TemplateValueError("Value is not a string or script statement")

    def _sized_tuple(self, size: int) -> Tuple[TemplateValue, ...]:
        values = self.as_tuple()
        if len(values) != size:
            raise TemplateValueError("Tuple is incorrect size")
        return values

    # -------------------------------------------------------------------------
    # Markup
    # -------------------------------------------------------------------------

    def to_markup(self) -> str:
        """Format this value as it would be written in markup."""
        kind = self.kind
        if kind == ValueKind.STRING:
            escaped = (
                self.data.replace("\\", "\\\\").replace("\"", "\\\"")
                .replace("\n", "\\n").replace("\t", "\\t")
            )
            return f"\"{escaped}\""
        if kind == ValueKind.INTEGER:
            return str(self.data)
        if kind == ValueKind.FLOAT:
            return _format_float(self.data)
        if kind == ValueKind.PERCENTAGE:
            if isinstance(self.data, float):
                return f"{_format_float(self.data)}%"
            return f"{self.data}%"
        if kind == ValueKind.TUPLE:
            return "(" + ", ".join(v.to_markup() for v in self.data) + ")"
        if kind == ValueKind.DEFAULT:
            return "_"
        if kind == ValueKind.SCRIPT_VALUE:
            return f"#{{{self.data}}}"
        return f"${{{self.data}}}"

    def __repr__(self) -> str:
        return f"TemplateValue({self.to_markup()})"


# =============================================================================
# Helpers
# =============================================================================

def _indexed(index: int, read):
    """Run a nested read, prefixing any error with the tuple position."""
    try:
        return read()
    except TrellisError as e:
        raise TemplateValueError(f"Value {index}", e) from e


def _check_range(value, minimum, maximum, unit: str = ""):
    if not (minimum <= value <= maximum):
        raise TemplateValueError(
            f"Out of range, valid range is {minimum}{unit} to {maximum}{unit}"
        )


def _format_float(value: float) -> str:
    # Shortest digits that read back to the same float, never exponent form
    return np.format_float_positional(float(value), unique=True, trim="0")
