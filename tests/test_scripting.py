import pytest

from trellis import PythonScriptRuntime, ScriptError, ScriptRuntimeConfig, ScriptTable


@pytest.fixture
def runtime():
    runtime = PythonScriptRuntime()
    runtime.set_model(ScriptTable({"logged_in": True, "user": "ada", "count": 3, "ratio": 0.5}))
    return runtime


def test_typed_evaluation(runtime):
    assert runtime.eval_bool("model.logged_in and model.count > 2") is True
    assert runtime.eval_integer("model.count * 2") == 6
    assert runtime.eval_float("model.ratio + 1") == 1.5
    assert runtime.eval_string("model.user.upper()") == "ADA"


def test_model_item_access(runtime):
    assert runtime.eval_string("model['user']") == "ada"
    assert runtime.eval_bool("'user' in model") is True
    assert runtime.eval_integer("model.get('missing', 7)") == 7


def test_float_accepts_integer_results(runtime):
    assert runtime.eval_float("model.count") == 3.0


@pytest.mark.parametrize("call,source", [
    ("eval_bool", "model.count"),
    ("eval_integer", "model.logged_in"),
    ("eval_integer", "model.ratio"),
    ("eval_float", "model.user"),
    ("eval_string", "model.count"),
])
def test_wrong_result_type_fails(runtime, call, source):
    with pytest.raises(ScriptError, match="did not return"):
        getattr(runtime, call)(source)


def test_failures_are_script_errors(runtime):
    with pytest.raises(ScriptError) as e:
        runtime.eval_integer("model.missing")
    assert e.value.source == "model.missing"
    assert isinstance(e.value.__cause__, AttributeError)

    with pytest.raises(ScriptError, match="syntax"):
        runtime.eval_integer("1 +")


def test_rejects_imports_and_private_names(runtime):
    with pytest.raises(ScriptError, match="Imports"):
        runtime.run_statement("import os", lambda name: None)
    with pytest.raises(ScriptError, match="not allowed"):
        runtime.eval_string("model.__class__")
    with pytest.raises(ScriptError, match="not allowed"):
        runtime.eval_string("__import__('os')")


def test_only_whitelisted_builtins():
    runtime = PythonScriptRuntime(ScriptRuntimeConfig(builtins=("len",)))
    assert runtime.eval_integer("len('abc')") == 3
    with pytest.raises(ScriptError):
        runtime.eval_integer("abs(-1)")


def test_set_model_replaces_bindings(runtime):
    runtime.set_model(ScriptTable({"count": 10}))
    assert runtime.eval_integer("model.count") == 10
    with pytest.raises(ScriptError):
        runtime.eval_string("model.user")


def test_run_statement_emits(runtime):
    emitted = []
    runtime.run_statement(
        """
        if model.logged_in:
            emit("welcome")
        emit("user:" + model.user)
        """,
        emitted.append,
    )
    assert emitted == ["welcome", "user:ada"]


def test_script_table():
    model = ScriptTable()
    model.set("flag", True)
    model["name"] = "x"
    assert model["flag"] is True
    assert model.get("missing") is None
    assert "name" in model and len(model) == 2
    assert model == ScriptTable({"flag": True, "name": "x"})

    with pytest.raises(TypeError):
        model.set("items", [1, 2])
