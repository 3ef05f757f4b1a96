"""
Ui

A self-contained component tree rendered to one target. Components live
in a flat store addressed by ID; parents refer to children by ID and
children never refer back.

Usage:
    context = Context.default()
    ui = Ui(Template.from_str(markup), Style(), Vec2(800, 600), context)

    menu = ui.insert_template(menu_template, "menu-slot", context)
    ui.update_model(menu, ScriptTable({"open": True}), context)

    for event in menu.event_sink:
        handle(event)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, NewType, Optional, Set, Tuple

from trellis.classes.base import ComponentClasses
from trellis.component import Component, PendingUpdate
from trellis.core.math2d import Vec2
from trellis.errors import StyleClassNotFoundError
from trellis.events import EventSink
from trellis.scripting.model import ScriptTable
from trellis.scripting.runtime import PythonScriptRuntime, ScriptRuntime
from trellis.template.component import ComponentTemplate
from trellis.template.template import Style, Template

logger = logging.getLogger(__name__)

ComponentId = NewType("ComponentId", int)


# =============================================================================
# Context
# =============================================================================

@dataclass
class Context:
    """
    What UIs are built and updated with: the available component classes
    and the script runtime.
    """
    classes: ComponentClasses = field(default_factory=ComponentClasses)
    runtime: ScriptRuntime = field(default_factory=PythonScriptRuntime)

    @staticmethod
    def default() -> Context:
        """Built-in classes and the Python expression runtime."""
        return Context(ComponentClasses.with_defaults(), PythonScriptRuntime())


class Tree:
    """Handle for one tree of components in a Ui, and the events it raised."""

    def __init__(self, root: ComponentId, event_sink: EventSink):
        self.root = root
        self.event_sink = event_sink

    def __repr__(self) -> str:
        return f"Tree(root={self.root}, pending_events={len(self.event_sink)})"


# =============================================================================
# Ui
# =============================================================================

class Ui:
    """
    Components built from a root template, plus any templates inserted
    later. Construction fails without leaving a partial tree behind.
    """

    def __init__(
        self,
        template: Template,
        style: Style,
        target_size: Vec2,
        context: Context,
        model: Optional[ScriptTable] = None,
    ):
        self.style = style
        self._target_size = target_size

        self._components: Dict[ComponentId, Component] = {}
        self._next_id = 0
        self._tree_roots: Set[ComponentId] = set()
        self._models: Dict[ComponentId, ScriptTable] = {}

        model = model if model is not None else ScriptTable()
        context.runtime.set_model(model)

        event_sink = EventSink(context.runtime, model)
        self._root_id = self._load(template.root, event_sink, context)
        self._models[self._root_id] = model
        self._tree = Tree(self._root_id, event_sink)

        logger.debug(f"Built ui with {len(self._components)} components, root {self._root_id}")

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    @property
    def root_id(self) -> ComponentId:
        return self._root_id

    @property
    def tree(self) -> Tree:
        """Handle for the root template's tree."""
        return self._tree

    @property
    def target_size(self) -> Vec2:
        return self._target_size

    def set_target_size(self, size: Vec2):
        self._target_size = size

    @property
    def tree_roots(self) -> Set[ComponentId]:
        """Roots of inserted templates."""
        return set(self._tree_roots)

    def get(self, id: ComponentId) -> Optional[Component]:
        return self._components.get(id)

    def __getitem__(self, id: ComponentId) -> Component:
        return self._components[id]

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[ComponentId]:
        return iter(sorted(self._components))

    # -------------------------------------------------------------------------
    # Inserting
    # -------------------------------------------------------------------------

    def insert_template(
        self,
        template: Template,
        style_class: str,
        context: Context,
        model: Optional[ScriptTable] = None,
    ) -> Tree:
        """
        Insert a template as the last child of the component with the
        given style class. With several candidates the lowest ID is used.
        """
        candidates = sorted(
            id for id, component in self._components.items()
            if component.style_class == style_class
        )
        if not candidates:
            raise StyleClassNotFoundError(style_class)
        if len(candidates) > 1:
            logger.warning(
                f"{len(candidates)} components have style class \"{style_class}\", "
                f"inserting into {candidates[0]}"
            )
        parent_id = candidates[0]

        model = model if model is not None else ScriptTable()
        context.runtime.set_model(model)

        event_sink = EventSink(context.runtime, model)
        id = self._load(template.root, event_sink, context)

        self._components[parent_id].children.append(id)
        self._tree_roots.add(id)
        self._models[id] = model

        logger.debug(f"Inserted tree {id} under component {parent_id}")
        return Tree(id, event_sink)

    def _load(self, template: ComponentTemplate, event_sink: EventSink, context: Context) -> ComponentId:
        # Components only enter the store once the whole subtree built
        staged: Dict[ComponentId, Component] = {}
        id = self._load_component(template, event_sink, context, staged)
        self._components.update(staged)
        return id

    def _load_component(
        self,
        template: ComponentTemplate,
        event_sink: EventSink,
        context: Context,
        staged: Dict[ComponentId, Component],
    ) -> ComponentId:
        component = Component.from_template(template, event_sink, self.style, context)
        id = ComponentId(self._next_id)
        self._next_id += 1

        for child in template.children:
            component.children.append(self._load_component(child, event_sink, context, staged))

        staged[id] = component
        return id

    # -------------------------------------------------------------------------
    # Updating
    # -------------------------------------------------------------------------

    def update_model(self, tree: Tree, model: ScriptTable, context: Context):
        """
        Bind a new model to a tree and re-resolve its components. If any
        component fails to resolve, the tree keeps its previous model and
        attributes.
        """
        self._update_tree(tree.root, context, model)
        self._models[tree.root] = model
        tree.event_sink.model = model

    def update_attributes(self, tree: Tree, context: Context):
        """Re-resolve a tree's components with the model it last used."""
        self._update_tree(tree.root, context)

    def set_style(self, style: Style, context: Context):
        """Replace the style and re-resolve every tree."""
        self.style = style
        for root in sorted({self._root_id} | self._tree_roots):
            self._update_tree(root, context)

    def _update_tree(self, root: ComponentId, context: Context, model: Optional[ScriptTable] = None):
        if model is None:
            model = self._models.get(root)
        context.runtime.set_model(model if model is not None else ScriptTable())

        # Nothing is applied until every component in the tree resolved
        pending: List[Tuple[Component, PendingUpdate]] = []
        self._prepare_update_recursive(root, context, pending)
        for component, update in pending:
            component.apply_update(update, context)

        logger.debug(f"Updated {len(pending)} components in tree {root}")

    def _prepare_update_recursive(
        self,
        id: ComponentId,
        context: Context,
        pending: List[Tuple[Component, PendingUpdate]],
    ):
        component = self._components[id]

        for child_id in component.children:
            # Inserted trees are updated through their own handle
            if child_id not in self._tree_roots:
                self._prepare_update_recursive(child_id, context, pending)

        pending.append((component, component.prepare_update(self.style, context)))

    def mark_all_rendered(self):
        for component in self._components.values():
            component.needs_render_update = False

    # -------------------------------------------------------------------------
    # Debug
    # -------------------------------------------------------------------------

    def describe(self) -> str:
        """Indented listing of the tree, one component per line."""
        lines: List[str] = []
        self._describe(self._root_id, 0, lines)
        return "\n".join(lines)

    def _describe(self, id: ComponentId, depth: int, lines: List[str]):
        component = self._components[id]
        text = "    " * depth + f"{id}: {component.class_name}"
        if component.style_class is not None:
            text += f".{component.style_class}"
        if id in self._tree_roots:
            text += " (inserted)"
        if component.needs_render_update:
            text += " *"
        lines.append(text)
        for child_id in component.children:
            self._describe(child_id, depth + 1, lines)
