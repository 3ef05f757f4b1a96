from typing import Dict, List, Tuple

import pytest

from trellis import Context, Style, Template, Ui, Vec2
from trellis.render import Renderer


class RecordingRenderer(Renderer):
    """Keeps track of cache sizes and records every call, draws nothing."""

    def __init__(self):
        self.sizes: Dict[int, Tuple[int, int]] = {}
        self.calls: List[tuple] = []

    def create_or_resize_cache(self, id, size):
        self.calls.append(("cache", id, size))
        if self.sizes.get(id) == size:
            return False
        self.sizes[id] = size
        return True

    def clear_cache(self, id):
        self.calls.append(("clear", id))

    def render_cache(self, target_id, source_id, position):
        self.calls.append(("composite", target_id, source_id, position.to_tuple()))

    def render_cache_to_target(self, id, position):
        self.calls.append(("target", id, position.to_tuple()))

    def rectangle(self, id, position, size, color):
        self.calls.append(("rectangle", id, position.to_tuple(), size.to_tuple(), color))

    def text(self, id, text, position, size, color):
        self.calls.append(("text", id, text, position.to_tuple(), size.to_tuple(), color))

    def vertices(self, id, vertices, indices, color):
        self.calls.append(("vertices", id, len(vertices), len(indices), color))

    def of_kind(self, kind: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind]

    def reset(self):
        self.calls.clear()


@pytest.fixture
def context():
    return Context.default()


@pytest.fixture
def recorder():
    return RecordingRenderer()


@pytest.fixture
def make_ui(context):
    """Build a Ui from markup text with the default context."""
    def make(markup, style="", size=(100, 100), model=None):
        return Ui(
            Template.from_str(markup),
            Style.from_str(style),
            Vec2(*size),
            context,
            model,
        )
    return make
