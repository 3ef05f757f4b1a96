"""
Input

Routes cursor input to components. Hit-testing walks the tree with the
current attributes rather than a cached layout, so it sees changes made
since the last render.
"""

from __future__ import annotations
import logging
from typing import Optional, TYPE_CHECKING

from trellis.core.math2d import Rect, Vec2
from trellis.layout import ComponentFlow

if TYPE_CHECKING:
    from trellis.ui import ComponentId, Ui

logger = logging.getLogger(__name__)


class Input:
    """
    Handles user input, raising events on components and keeping track
    of what the cursor is over.
    """

    def __init__(self):
        self.hovering_over: Optional[ComponentId] = None

    def is_cursor_over_ui(self) -> bool:
        """True if the cursor is over a component that captures it."""
        return self.hovering_over is not None

    def handle_cursor_moved(self, position: Vec2, ui: Ui):
        new_hovering = find_at_position(position, ui)
        if new_hovering == self.hovering_over:
            return

        logger.debug(f"Hover moved from {self.hovering_over} to {new_hovering}")

        if self.hovering_over is not None:
            component = ui.get(self.hovering_over)
            if component is not None:
                component.raise_hover_end_event()

        if new_hovering is not None:
            ui[new_hovering].raise_hover_start_event()

        self.hovering_over = new_hovering

    def handle_drag_started(self, position: Vec2, ui: Ui):
        """Start of a cursor or touch drag. Presses fire on release."""
        pass

    def handle_drag_ended(self, position: Vec2, ui: Ui):
        """End of a cursor or touch drag, presses whatever is under it."""
        id = find_at_position(position, ui)
        if id is not None:
            logger.debug(f"Pressed component {id}")
            ui[id].raise_pressed_event()


def find_at_position(position: Vec2, ui: Ui) -> Optional[ComponentId]:
    """Topmost cursor-capturing component at a position, or None."""
    target_size = ui.target_size
    flow = ComponentFlow(target_size)
    return _find_at_position(position, ui, ui.root_id, Vec2(0.0, 0.0), target_size, flow)


def _find_at_position(
    position: Vec2,
    ui: Ui,
    id: ComponentId,
    parent_position: Vec2,
    parent_size: Vec2,
    parent_flow: ComponentFlow,
) -> Optional[ComponentId]:
    component = ui[id]
    computed_position = parent_position + component.compute_position(parent_size, parent_flow)
    computed_size = component.compute_size(parent_size)

    # Children lie within their parent, a miss here misses them too
    if not Rect.from_position_size(computed_position, computed_size).contains(position.x, position.y):
        return None

    found_id = id if component.class_.is_capturing_cursor() else None

    # Later children draw on top, so the last hit wins
    flow = ComponentFlow(computed_size)
    for child_id in component.children:
        child_found = _find_at_position(position, ui, child_id, computed_position, computed_size, flow)
        if child_found is not None:
            found_id = child_found

    return found_id
