import pytest

from trellis import EventHook, EventSink, PythonScriptRuntime, ScriptError, ScriptTable


def test_events_come_out_in_raise_order():
    sink = EventSink()
    sink.push("a")
    sink.raise_hook(EventHook.direct("b"))
    sink.push("c")

    assert len(sink) == 3
    assert sink.next() == "a"
    assert sink.drain() == ["b", "c"]
    assert sink.next() is None


def test_iterating_drains():
    sink = EventSink()
    sink.push("a")
    sink.push("b")
    assert list(sink) == ["a", "b"]
    assert len(sink) == 0


def test_script_hooks_emit_through_runtime():
    runtime = PythonScriptRuntime()
    runtime.set_model(ScriptTable({"count": 2}))
    sink = EventSink(runtime)

    sink.push("first")
    sink.raise_hook(EventHook.script("emit('a')\nif model.count > 1: emit('b')"))
    assert sink.drain() == ["first", "a", "b"]


def test_script_hook_without_runtime_fails():
    with pytest.raises(ScriptError):
        EventSink().raise_hook(EventHook.script("emit('x')"))
