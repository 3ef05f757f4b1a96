import pytest

from trellis import ComponentFlow, Coordinate, Coordinates, Docking, PythonScriptRuntime, TemplateValue, TemplateValueError, Vec2
from trellis.layout import compute_position, compute_size


def place(limits, items):
    flow = ComponentFlow(limits)
    return [flow.position(size, margin) for size, margin in items]


def test_flow_places_left_to_right_then_wraps():
    positions = place(Vec2(100, 100), [(Vec2(40, 20), 5)] * 3)
    assert positions == [Vec2(5, 5), Vec2(50, 5), Vec2(5, 30)]


def test_flow_wraps_only_past_the_limit():
    positions = place(Vec2(100, 100), [(Vec2(50, 10), 0), (Vec2(50, 10), 0), (Vec2(1, 10), 0)])
    assert positions == [Vec2(0, 0), Vec2(50, 0), Vec2(0, 10)]


def test_flow_next_line_uses_tallest_component():
    positions = place(Vec2(100, 100), [(Vec2(40, 10), 0), (Vec2(40, 35), 0), (Vec2(40, 10), 0)])
    assert positions[2] == Vec2(0, 35)


def test_flow_margins_overlap():
    positions = place(Vec2(200, 100), [(Vec2(20, 10), 10), (Vec2(20, 10), 4)])
    # Gap is the larger margin, not the sum
    assert positions[1].x - (positions[0].x + 20) == 10


def test_flow_is_deterministic():
    items = [(Vec2(30, 10), 2), (Vec2(60, 25), 6), (Vec2(45, 5), 0), (Vec2(10, 10), 3)]
    assert place(Vec2(120, 80), items) == place(Vec2(120, 80), items)


@pytest.mark.parametrize("docking,expected", [
    (Docking.START, 0.0),
    (Docking.MIDDLE, 35.0),
    (Docking.END, 70.0),
])
def test_docking(docking, expected):
    assert docking.dock(0.0, 100.0, 30.0) == expected


def test_end_docking_includes_offset():
    position = Coordinates(Coordinate.exact(-5), Coordinate.exact(10))
    result = compute_position(
        position, (Docking.END, Docking.START), Vec2(30, 30), 0.0,
        Vec2(100, 100), ComponentFlow(Vec2(100, 100)),
    )
    assert result == Vec2(65, 10)


def test_explicit_position_does_not_advance_flow():
    flow = ComponentFlow(Vec2(100, 100))
    compute_position(
        Coordinates(Coordinate.exact(50), Coordinate.exact(50)),
        (Docking.START, Docking.START), Vec2(10, 10), 0.0, Vec2(100, 100), flow,
    )
    assert flow.position(Vec2(10, 10), 0.0) == Vec2(0, 0)


def test_size_defaults_to_parent():
    assert compute_size(None, Vec2(80, 60)) == Vec2(80, 60)
    size = Coordinates(Coordinate.relative_to_parent(0.5), Coordinate.exact(20))
    assert compute_size(size, Vec2(80, 60)) == Vec2(40, 20)


def test_docking_from_value():
    runtime = PythonScriptRuntime()
    value = TemplateValue.of_tuple(TemplateValue.of_string("middle"), TemplateValue.of_string("end"))
    assert Docking.from_value(value, runtime) == (Docking.MIDDLE, Docking.END)

    with pytest.raises(TemplateValueError):
        Docking.from_value(TemplateValue.of_tuple(TemplateValue.of_string("left"), TemplateValue.of_string("end")), runtime)
    with pytest.raises(TemplateValueError):
        Docking.from_value(TemplateValue.of_tuple(TemplateValue.of_string("end")), runtime)
