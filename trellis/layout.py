"""
Layout

Size and position rules for components inside their parent.

A component with an explicit `position` is placed by docking on each
axis. Without one it is placed by the parent's ComponentFlow, which
lays children out left to right and wraps to a new line when the next
child would overflow the parent's width.

Usage:
    flow = ComponentFlow(Vec2(100, 100))
    flow.position(Vec2(40, 20), margin=5)   # Vec2(5, 5)
    flow.position(Vec2(40, 20), margin=5)   # Vec2(50, 5)
    flow.position(Vec2(40, 20), margin=5)   # Vec2(5, 30), wrapped
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

from trellis.core.math2d import Vec2
from trellis.errors import TemplateValueError
from trellis.template.value import Coordinates, TemplateValue

if TYPE_CHECKING:
    from trellis.scripting.runtime import ScriptRuntime


# =============================================================================
# Docking
# =============================================================================

class Docking(Enum):
    """Which edge of the parent an explicit position is measured from."""
    START = "start"
    MIDDLE = "middle"
    END = "end"

    @staticmethod
    def from_value(value: TemplateValue, runtime: ScriptRuntime) -> Tuple[Docking, Docking]:
        values = value.as_tuple()
        if len(values) != 2:
            raise TemplateValueError("Tuple is incorrect size")
        return (
            Docking._from_value_single(values[0], runtime),
            Docking._from_value_single(values[1], runtime),
        )

    @staticmethod
    def _from_value_single(value: TemplateValue, runtime: ScriptRuntime) -> Docking:
        name = value.as_string(runtime)
        try:
            return Docking(name)
        except ValueError:
            raise TemplateValueError(
                f"Values must be either \"start\", \"middle\" or \"end\", got \"{name}\""
            ) from None

    def dock(self, offset: float, parent_extent: float, extent: float) -> float:
        if self is Docking.START:
            return offset
        if self is Docking.MIDDLE:
            return offset + (parent_extent - extent) * 0.5
        return offset + parent_extent - extent


# =============================================================================
# Flow
# =============================================================================

class ComponentFlow:
    """
    Places children without an explicit position.

    Margins overlap rather than add up: the gap between two neighbours
    on a line is the larger of their margins. State is per parent and
    per layout pass.
    """

    def __init__(self, limits: Vec2):
        self.limits = limits
        self.pointer = Vec2(0.0, 0.0)
        self.pointer_margin = 0.0
        self.next_line = 0.0

    def position(self, size: Vec2, margin: float) -> Vec2:
        max_x_margin = max(self.pointer_margin, margin)

        next_x = self.pointer.x + max_x_margin
        if next_x + size.x <= self.limits.x:
            position = Vec2(next_x, self.pointer.y + margin)
        else:
            position = Vec2(margin, self.next_line + margin)

        # Vertical margin only uses the current component's margin, lines
        # are not measured ahead of time
        self.pointer = position + Vec2(size.x, -margin)
        self.pointer_margin = margin
        self.next_line = max(position.y + size.y, self.next_line)

        return position


# =============================================================================
# Size and Position
# =============================================================================

def compute_size(size: Optional[Coordinates], parent_size: Vec2) -> Vec2:
    """Explicit size resolved against the parent, or the parent's full size."""
    if size is None:
        return Vec2(parent_size.x, parent_size.y)
    return size.to_vec(parent_size)


def compute_position(
    position: Optional[Coordinates],
    docking: Tuple[Docking, Docking],
    size: Vec2,
    margin: float,
    parent_size: Vec2,
    parent_flow: ComponentFlow,
) -> Vec2:
    """Docked explicit position, or the next slot in the parent's flow."""
    if position is None:
        return parent_flow.position(size, margin)

    offset = position.to_vec(parent_size)
    return Vec2(
        docking[0].dock(offset.x, parent_size.x, size.x),
        docking[1].dock(offset.y, parent_size.y, size.y),
    )
