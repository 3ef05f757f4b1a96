"""
Render-Cache Driver

Brings every component's cache up to date, bottom-up, and composites
the root cache to the target.

A component is rendered this pass if its cache was just created or
resized, if any of its children was rendered, or if its own
`needs_render_update` flag is set. Everything else keeps last pass's
pixels. After the pass every dirty flag is cleared.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, TYPE_CHECKING

from trellis.core.math2d import Vec2
from trellis.layout import ComponentFlow

if TYPE_CHECKING:
    from trellis.render.base import Renderer
    from trellis.ui import ComponentId, Ui

logger = logging.getLogger(__name__)


@dataclass
class RenderStats:
    """What a render pass did."""
    visited: int = 0
    rendered: List[int] = field(default_factory=list)   # In render order, children first

    @property
    def rendered_count(self) -> int:
        return len(self.rendered)


def render(renderer: Renderer, ui: Ui) -> RenderStats:
    """Render a Ui through a backend."""
    stats = RenderStats()
    root_id = ui.root_id
    target_size = ui.target_size

    _update_component_cache(renderer, ui, root_id, target_size, stats)

    position = ui[root_id].compute_position(target_size, ComponentFlow(target_size))
    renderer.render_cache_to_target(root_id, position)

    ui.mark_all_rendered()

    logger.debug(f"Render pass visited {stats.visited}, rendered {stats.rendered_count}")
    return stats


def _update_component_cache(
    renderer: Renderer,
    ui: Ui,
    id: ComponentId,
    parent_size: Vec2,
    stats: RenderStats,
) -> bool:
    component = ui[id]
    size = component.compute_size(parent_size)
    stats.visited += 1

    cache_empty = renderer.create_or_resize_cache(id, size.ceil())

    # Children first, their caches have to be current before compositing
    child_updated = False
    for child_id in component.children:
        if _update_component_cache(renderer, ui, child_id, size, stats):
            child_updated = True

    if not (cache_empty or child_updated or component.needs_render_update):
        return False

    renderer.clear_cache(id)
    component.render(id, size, renderer)

    # Later children draw over earlier ones
    flow = ComponentFlow(size)
    for child_id in component.children:
        child_position = ui[child_id].compute_position(size, flow)
        renderer.render_cache(id, child_id, child_position)

    stats.rendered.append(id)
    return True
