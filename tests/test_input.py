import pytest

from trellis import ComponentClass, Context, Input, ScriptTable, Style, Template, Ui, Vec2, find_at_position


class RecordingClass(ComponentClass):
    """Captures the cursor and records the events it receives."""

    log = []

    def __init__(self, attributes, runtime):
        self.name = attributes.attribute("name", lambda v: v.as_string(runtime), "?")

    def update_attributes(self, attributes, runtime):
        pass

    def render(self, id, attributes, size, renderer):
        pass

    def is_capturing_cursor(self):
        return True

    def hover_start_event(self, event_sink):
        RecordingClass.log.append(("start", self.name))
        return False

    def hover_end_event(self, event_sink):
        RecordingClass.log.append(("end", self.name))
        return False


@pytest.fixture
def recording_context():
    RecordingClass.log = []
    context = Context.default()
    context.classes.register("recording", RecordingClass)
    return context


OVERLAP = (
    "container\n"
    "    button { size: (50, 50), position: (0, 0), on-pressed: \"under\" }\n"
    "    button { size: (50, 50), position: (25, 25), on-pressed: \"over\" }\n"
)


def test_later_sibling_wins_where_they_overlap(make_ui):
    ui = make_ui(OVERLAP)
    assert find_at_position(Vec2(10, 10), ui) == 1
    assert find_at_position(Vec2(30, 30), ui) == 2
    assert find_at_position(Vec2(90, 90), ui) is None


def test_containers_without_color_do_not_capture(make_ui):
    ui = make_ui("container\n    container { size: (10, 10) }\n")
    assert find_at_position(Vec2(5, 5), ui) is None

    ui = make_ui("container { color: (1, 1, 1) }\n    container { size: (10, 10) }\n")
    assert find_at_position(Vec2(5, 5), ui) == 0


def test_hit_rectangles_are_half_open(make_ui):
    ui = make_ui("container\n    button { size: (10, 10), position: (10, 10) }\n")
    assert find_at_position(Vec2(10, 10), ui) == 1
    assert find_at_position(Vec2(19.9, 19.9), ui) == 1
    assert find_at_position(Vec2(20, 20), ui) is None
    assert find_at_position(Vec2(9.9, 15), ui) is None


def test_children_outside_their_parent_are_not_hit(make_ui):
    ui = make_ui(
        "container\n"
        "    container { size: (20, 20) }\n"
        "        button { size: (10, 10), position: (30, 0) }\n"
    )
    assert find_at_position(Vec2(35, 5), ui) is None


def test_hover_end_fires_before_hover_start(recording_context):
    ui = Ui(
        Template.from_str(
            "container\n"
            "    recording { size: (10, 10), name: \"a\" }\n"
            "    recording { size: (10, 10), name: \"b\" }\n"
        ),
        Style(), Vec2(100, 100), recording_context,
    )
    ui_input = Input()

    ui_input.handle_cursor_moved(Vec2(5, 5), ui)
    ui_input.handle_cursor_moved(Vec2(6, 6), ui)
    ui_input.handle_cursor_moved(Vec2(15, 5), ui)
    ui_input.handle_cursor_moved(Vec2(80, 80), ui)

    assert RecordingClass.log == [
        ("start", "a"),
        ("end", "a"),
        ("start", "b"),
        ("end", "b"),
    ]
    assert not ui_input.is_cursor_over_ui()


def test_hovering_a_button_marks_it_dirty(make_ui):
    ui = make_ui(OVERLAP)
    ui.mark_all_rendered()
    ui_input = Input()

    ui_input.handle_cursor_moved(Vec2(10, 10), ui)
    assert ui_input.hovering_over == 1
    assert ui_input.is_cursor_over_ui()
    assert ui[1].class_.hovering
    assert ui[1].needs_render_update
    assert not ui[2].needs_render_update

    ui.mark_all_rendered()
    ui_input.handle_cursor_moved(Vec2(40, 40), ui)
    assert not ui[1].class_.hovering
    assert ui[1].needs_render_update
    assert ui[2].needs_render_update


def test_drag_end_presses_the_component_under_it(make_ui):
    ui = make_ui(OVERLAP)
    ui_input = Input()

    ui_input.handle_drag_started(Vec2(30, 30), ui)
    assert ui.tree.event_sink.next() is None

    ui_input.handle_drag_ended(Vec2(30, 30), ui)
    ui_input.handle_drag_ended(Vec2(5, 5), ui)
    ui_input.handle_drag_ended(Vec2(90, 90), ui)

    assert ui.tree.event_sink.drain() == ["over", "under"]


def test_pressed_events_go_to_the_inserted_tree(make_ui, context):
    ui = make_ui("container\n    container.slot { size: (50, 50) }\n")
    menu = ui.insert_template(
        Template.from_str("button { on-pressed: \"open\" }\n"), "slot", context,
    )

    Input().handle_drag_ended(Vec2(10, 10), ui)

    assert menu.event_sink.drain() == ["open"]
    assert len(ui.tree.event_sink) == 0


def test_script_hooks_can_emit_several_events(make_ui):
    ui = make_ui(
        "button { on-pressed: ${emit(\"clicked\")\nif model.admin: emit(\"audit\")} }\n",
        model=ScriptTable({"admin": True}),
    )
    Input().handle_drag_ended(Vec2(1, 1), ui)
    assert ui.tree.event_sink.drain() == ["clicked", "audit"]


def test_script_hooks_use_their_own_trees_model(make_ui, context):
    ui = make_ui(
        "container\n    container.slot { size: (50, 50) }\n",
        model=ScriptTable({"name": "root"}),
    )
    menu = ui.insert_template(
        Template.from_str("button { on-pressed: ${emit(model.name)} }\n"),
        "slot", context, ScriptTable({"name": "menu"}),
    )
    # Binds the root tree's model last
    ui.update_model(ui.tree, ScriptTable({"name": "updated"}), context)

    Input().handle_drag_ended(Vec2(10, 10), ui)
    assert menu.event_sink.drain() == ["menu"]


def test_hit_testing_sees_updates_before_rendering(make_ui, context):
    ui = make_ui(
        "container\n    button { size: (10, 10), position: (#{model.x}, 0) }\n",
        model=ScriptTable({"x": 0}),
    )
    assert find_at_position(Vec2(5, 5), ui) == 1

    ui.update_model(ui.tree, ScriptTable({"x": 50}), context)
    assert find_at_position(Vec2(5, 5), ui) is None
    assert find_at_position(Vec2(55, 5), ui) == 1
