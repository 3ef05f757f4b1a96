import pytest

from trellis import (
    Attributes, ComponentAttributeError, PythonScriptRuntime, ScriptError, ScriptTable,
    Style, Template, TemplateValue, TemplateValueError,
)


@pytest.fixture
def runtime():
    runtime = PythonScriptRuntime()
    runtime.set_model(ScriptTable({"on": True, "off": False, "count": 2}))
    return runtime


def resolve(markup, style, runtime):
    return Attributes.resolve(Template.from_str(markup).root, Style.from_str(style), runtime)


def test_duplicate_keys_last_wins(runtime):
    attributes = resolve("root { key1: 5, key1: 10 }\n", "", runtime)
    assert attributes.get("key1") == TemplateValue.of_integer(10)
    assert len(attributes) == 1


def test_template_overrides_style(runtime):
    style = "root { a: 1, b: 2 }\nother { c: 3 }\n"
    attributes = resolve("root { a: 10 }\n", style, runtime)
    assert attributes.get("a") == TemplateValue.of_integer(10)
    assert attributes.get("b") == TemplateValue.of_integer(2)
    assert "c" not in attributes


def test_later_style_rules_override_earlier(runtime):
    attributes = resolve("root\n", "root { a: 1 }\nroot { a: 2 }\n", runtime)
    assert attributes.get("a") == TemplateValue.of_integer(2)


def test_conditionals_filter_attributes(runtime):
    markup = "root { a: 1, a: 2 ?model.off?, b: 3 ?{model.count > 1} }\n"
    attributes = resolve(markup, "root { c: 4 ?model.off? }\n", runtime)
    assert attributes.get("a") == TemplateValue.of_integer(1)
    assert attributes.get("b") == TemplateValue.of_integer(3)
    assert attributes.get("c") is None


def test_default_is_treated_as_absent(runtime):
    attributes = resolve("root { a: _ }\n", "root { a: 5 }\n", runtime)
    assert attributes.get("a").is_default
    assert attributes.attribute("a", lambda v: v.as_integer(runtime), 7) == 7
    assert attributes.attribute_optional("a", lambda v: v.as_integer(runtime)) is None
    assert attributes.attribute_optional("missing", lambda v: v.as_integer(runtime)) is None


def test_coercion_errors_name_component_line_and_field(runtime):
    template = Template.from_str("root\n    child { color: (1, 2) }\n")
    child = Attributes.resolve(template.root.children[0], Style(), runtime)
    assert child.component_class == "child"

    with pytest.raises(ComponentAttributeError) as e:
        child.attribute_optional("color", lambda v: v.as_color(runtime))
    error = e.value
    assert (error.component, error.line, error.field) == ("child", 2, "color")
    assert isinstance(error.__cause__, TemplateValueError)
    assert "Tuple is incorrect size" in str(error)


def test_conditional_errors_are_attributed(runtime):
    with pytest.raises(ComponentAttributeError) as e:
        resolve("root { a: 1 ?model.count? }\n", "", runtime)
    assert e.value.field == "a"
    assert isinstance(e.value.inner, ScriptError)


def test_resolution_is_idempotent(runtime):
    template = Template.from_str("root { a: 1, b: #{model.count}, a: 3 }\n").root
    style = Style.from_str("root { c: (1, 2), b: _ }\n")
    first = Attributes.resolve(template, style, runtime)
    second = Attributes.resolve(template, style, runtime)
    assert first == second
    assert dict(first.items()) == dict(second.items())
