import logging

import pytest

from trellis import (
    ClassNotRegisteredError, ComponentAttributeError, ContainerClass, ScriptTable,
    Style, StyleClassNotFoundError, Template, Vec2,
)
from trellis.template import color_from_u8

SLOTS = (
    "container\n"
    "    container.slot\n"
    "    container.slot\n"
)


def test_ids_are_assigned_depth_first(make_ui):
    ui = make_ui("container\n    container\n        container\n    container\n")
    assert ui.root_id == 0
    assert ui[0].children == [1, 3]
    assert ui[1].children == [2]
    assert list(ui) == [0, 1, 2, 3]
    assert len(ui) == 4


def test_components_get_their_class(make_ui):
    ui = make_ui("container.main\n    button { text: \"Go\" }\n")
    assert isinstance(ui[0].class_, ContainerClass)
    assert ui[0].style_class == "main"
    assert ui[1].class_.attributes.text == "Go"
    assert ui.get(99) is None
    with pytest.raises(KeyError):
        ui[99]


def test_new_components_need_rendering(make_ui):
    ui = make_ui("container\n    container\n")
    assert all(ui[id].needs_render_update for id in ui)
    ui.mark_all_rendered()
    assert not any(ui[id].needs_render_update for id in ui)


def test_unknown_class_fails_construction(make_ui):
    with pytest.raises(ClassNotRegisteredError, match="\"slider\""):
        make_ui("container\n    slider\n")


def test_attribute_errors_fail_construction(make_ui):
    with pytest.raises(ComponentAttributeError) as e:
        make_ui("container\n    container { color: (1, 2) }\n")
    assert e.value.line == 2


def test_core_attributes_are_loaded(make_ui):
    ui = make_ui(
        "container\n"
        "    container { position: (10, 50%), size: (20, 30), docking: (\"end\", \"middle\"), margin: 4 }\n"
    )
    child = ui[1]
    assert child.compute_size(Vec2(100, 100)) == Vec2(20, 30)
    assert child.attributes.margin == 4.0


def test_model_is_used_when_building(make_ui):
    ui = make_ui(
        "container { color: (#{model.shade}, 0, 0) }\n",
        model=ScriptTable({"shade": 51}),
    )
    assert ui[0].class_.background.color == color_from_u8(51, 0, 0)


def test_insert_template_under_style_class(make_ui, context, caplog):
    ui = make_ui(SLOTS)

    with caplog.at_level(logging.WARNING, logger="trellis.ui"):
        tree = ui.insert_template(Template.from_str("container\n    button\n"), "slot", context)

    # Several matches, the lowest ID is used
    assert "inserting into 1" in caplog.text
    assert tree.root == 3
    assert ui[1].children == [3]
    assert ui[3].children == [4]
    assert ui[2].children == []
    assert ui.tree_roots == {3}


def test_insert_template_without_match_fails(make_ui, context):
    ui = make_ui(SLOTS)
    with pytest.raises(StyleClassNotFoundError):
        ui.insert_template(Template.from_str("container\n"), "missing", context)


def test_failed_insert_leaves_ui_untouched(make_ui, context):
    ui = make_ui(SLOTS)
    with pytest.raises(ClassNotRegisteredError):
        ui.insert_template(Template.from_str("container\n    slider\n"), "slot", context)

    assert len(ui) == 3
    assert ui[1].children == []
    assert ui.tree_roots == set()

    # IDs are not reused
    tree = ui.insert_template(Template.from_str("container\n"), "slot", context)
    assert tree.root not in (0, 1, 2)


def test_update_model_reresolves_and_marks_dirty(make_ui, context):
    ui = make_ui(
        "container { color: (#{model.shade}, 0, 0) }\n    container\n",
        model=ScriptTable({"shade": 10}),
    )
    ui.mark_all_rendered()

    ui.update_model(ui.tree, ScriptTable({"shade": 200}), context)

    assert ui[0].class_.background.color == color_from_u8(200, 0, 0)
    assert ui[0].needs_render_update
    assert ui[1].needs_render_update


def test_failed_update_model_changes_nothing(make_ui, context):
    ui = make_ui(
        "container { color: (#{model.shade}, 0, 0), margin: #{model.m} }\n"
        "    container { color: (#{model.shade}, 0, 0) }\n",
        model=ScriptTable({"shade": 10, "m": 1}),
    )
    ui.mark_all_rendered()

    # The child resolves, the parent's margin does not
    with pytest.raises(ComponentAttributeError):
        ui.update_model(ui.tree, ScriptTable({"shade": 200}), context)

    assert ui[0].class_.background.color == color_from_u8(10, 0, 0)
    assert ui[1].class_.background.color == color_from_u8(10, 0, 0)
    assert ui[0].attributes.margin == 1.0
    assert not any(ui[id].needs_render_update for id in ui)

    # The previous model is still bound
    ui.update_attributes(ui.tree, context)
    assert ui[0].class_.background.color == color_from_u8(10, 0, 0)


def test_failed_class_update_still_marks_dirty(make_ui, context):
    ui = make_ui(
        "container\n"
        "    container { color: (#{model.shade}, 0, 0) }\n"
        "    button { text: #{model.label} }\n",
        model=ScriptTable({"shade": 10, "label": "hi"}),
    )
    ui.mark_all_rendered()

    with pytest.raises(ComponentAttributeError):
        ui.update_model(ui.tree, ScriptTable({"shade": 200, "label": 5}), context)

    # Whatever changed appearance will be redrawn
    assert ui[1].class_.background.color == color_from_u8(200, 0, 0)
    assert ui[1].needs_render_update
    assert ui[2].needs_render_update


def test_updates_stop_at_inserted_trees(make_ui, context):
    ui = make_ui(SLOTS)
    menu = ui.insert_template(
        Template.from_str("container\n    button { text: #{model.label} }\n"),
        "slot", context, ScriptTable({"label": "hi"}),
    )
    ui.mark_all_rendered()

    # The root tree's model has no label, the inserted tree must not be touched
    ui.update_model(ui.tree, ScriptTable(), context)
    assert ui[0].needs_render_update
    assert not ui[menu.root].needs_render_update
    assert not ui[4].needs_render_update

    # Updated through its own handle, with the model it was inserted with
    ui.update_attributes(menu, context)
    assert ui[menu.root].needs_render_update
    assert ui[4].class_.attributes.text == "hi"


def test_set_style_updates_every_tree(make_ui, context):
    ui = make_ui(SLOTS)
    menu = ui.insert_template(Template.from_str("container\n"), "slot", context)
    assert ui[menu.root].class_.background.color is None

    ui.set_style(Style.from_str("container { color: (0, 0, 255) }\n"), context)

    for id in ui:
        assert ui[id].class_.background.color == (0.0, 0.0, 1.0, 1.0)


def test_resolving_twice_gives_identical_attributes(make_ui, context):
    ui = make_ui(
        "container { color: (1, 2, 3), margin: #{model.m} }\n",
        style="container { margin: 1, border-radius: 2 }\n",
        model=ScriptTable({"m": 3}),
    )
    component = ui[0]
    assert component.resolve_attributes(ui.style, context) == component.resolve_attributes(ui.style, context)


def test_target_size(make_ui):
    ui = make_ui("container\n", size=(64, 32))
    assert ui.target_size == Vec2(64, 32)
    ui.set_target_size(Vec2(10, 10))
    assert ui.target_size == Vec2(10, 10)


def test_describe(make_ui, context):
    ui = make_ui("container.main\n    button\n    container.slot\n")
    ui.insert_template(Template.from_str("button\n"), "slot", context)
    ui.mark_all_rendered()
    assert ui.describe() == (
        "0: container.main\n"
        "    1: button\n"
        "    2: container.slot\n"
        "        3: button (inserted)"
    )
