"""
Markup Demo

Loads a UI from demo/mark/, renders it with the moderngl backend and
routes the mouse into it.

Shows:
- Templates and a style loaded from files
- Attributes driven by the model (the counter label, the Reset button color)
- Inserting a second template into the side panel
- Direct and script event hooks

Run:
    python demo/markup_demo.py
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List

import moderngl_window as mglw

from trellis import Context, Input, ScriptTable, Style, Template, Tree, Ui, Vec2
from trellis.render import render
from trellis.render.gl import GlRenderer, GlRendererConfig

logger = logging.getLogger(__name__)

MARK_DIR = Path(__file__).parent / "mark"


class MarkupDemoApp(mglw.WindowConfig):
    """Demo application driving a markup UI."""

    gl_version = (3, 3)
    title = "Markup Demo"
    window_size = (960, 540)
    aspect_ratio = None
    resource_dir = "."

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        self.context = Context.default()
        self.count = 0
        self.menu: Tree = None

        w, h = self.wnd.buffer_size
        self.ui = Ui(
            Template.from_file(MARK_DIR / "ui.mark"),
            Style.from_file(MARK_DIR / "_style.mark"),
            Vec2(w, h),
            self.context,
            self._model(),
        )
        self.ui_input = Input()
        self.renderer = GlRenderer(
            self.ctx, (w, h), config=GlRendererConfig(clear_color=(0.08, 0.09, 0.11, 1.0)),
        )

        logger.info(f"Loaded UI:\n{self.ui.describe()}")

    def _model(self) -> ScriptTable:
        return ScriptTable({"count": self.count})

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def _handle_events(self):
        trees: List[Tree] = [self.ui.tree]
        if self.menu is not None:
            trees.append(self.menu)

        changed = False
        for tree in trees:
            for event in tree.event_sink:
                logger.info(f"Event: {event}")
                changed |= self._handle_event(event)

        if changed:
            self.ui.update_model(self.ui.tree, self._model(), self.context)

    def _handle_event(self, event: str) -> bool:
        """Returns True if the model changed."""
        if event == "add":
            self.count += 1
            return True
        if event == "reset":
            self.count = 0
            return True
        if event == "menu" and self.menu is None:
            self.menu = self.ui.insert_template(
                Template.from_file(MARK_DIR / "menu.mark"),
                "side",
                self.context,
                ScriptTable({"title": "Menu"}),
            )
            logger.info(f"Inserted menu:\n{self.ui.describe()}")
        return False

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def on_render(self, time: float, frame_time: float):
        """Main render loop."""
        self._handle_events()

        self.renderer.clear_target()
        stats = render(self.renderer, self.ui)
        if stats.rendered_count:
            logger.debug(f"Rendered {stats.rendered}")

    def on_resize(self, width: int, height: int):
        w, h = self.wnd.buffer_size
        self.ui.set_target_size(Vec2(w, h))
        self.renderer.set_target_size((w, h))

    # -------------------------------------------------------------------------
    # Input Handling
    # -------------------------------------------------------------------------

    def _cursor(self, x: float, y: float) -> Vec2:
        return Vec2(x, y) * self.wnd.pixel_ratio

    def on_mouse_position_event(self, x, y, dx, dy):
        self.ui_input.handle_cursor_moved(self._cursor(x, y), self.ui)

    def on_mouse_drag_event(self, x, y, dx, dy):
        self.ui_input.handle_cursor_moved(self._cursor(x, y), self.ui)

    def on_mouse_press_event(self, x, y, button):
        self.ui_input.handle_drag_started(self._cursor(x, y), self.ui)

    def on_mouse_release_event(self, x, y, button):
        self.ui_input.handle_drag_ended(self._cursor(x, y), self.ui)

    def on_close(self):
        self.renderer.release()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    mglw.run_window_config(MarkupDemoApp)
