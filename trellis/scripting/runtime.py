"""
Script Runtime

The capability templates use to evaluate `#{...}` values, `${...}`
statements and attribute conditionals.

The engine only talks to the abstract ScriptRuntime. PythonScriptRuntime
is the default implementation: it evaluates small Python expressions
against the current model.

    runtime = PythonScriptRuntime()
    runtime.set_model(ScriptTable({"count": 3}))
    runtime.eval_integer("model.count * 2")  # 6
"""

from __future__ import annotations
import ast
import builtins
import logging
import textwrap
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import CodeType
from typing import Any, Callable, Dict, Tuple

from trellis.errors import ScriptError
from trellis.scripting.model import ScriptTable, ScriptValue

logger = logging.getLogger(__name__)

EmitFn = Callable[[str], None]


# =============================================================================
# Capability
# =============================================================================

class ScriptRuntime(ABC):
    """
    Evaluates script sources found in templates.

    Implementations raise ScriptError on failure, including when the
    result has the wrong type.
    """

    @abstractmethod
    def set_model(self, model: ScriptTable):
        """Bind the model used by subsequent evaluations."""

    @abstractmethod
    def eval_bool(self, source: str) -> bool:
        ...

    @abstractmethod
    def eval_integer(self, source: str) -> int:
        ...

    @abstractmethod
    def eval_float(self, source: str) -> float:
        ...

    @abstractmethod
    def eval_string(self, source: str) -> str:
        ...

    @abstractmethod
    def run_statement(self, source: str, emit: EmitFn):
        """Execute a statement, `emit(name)` queues an event."""


# =============================================================================
# Python Expressions
# =============================================================================

@dataclass
class ScriptRuntimeConfig:
    builtins: Tuple[str, ...] = (
        "abs", "min", "max", "round", "len", "str", "int", "float", "bool",
    )
    model_name: str = "model"
    emit_name: str = "emit"


class _ModelView:
    """Read-only view of a ScriptTable, `model.key` or `model["key"]`."""

    def __init__(self, values: Dict[str, ScriptValue]):
        self._values = values

    def __getattr__(self, name: str) -> ScriptValue:
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(f"model has no field \"{name}\"") from None

    def __getitem__(self, key: str) -> ScriptValue:
        return self._values[key]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)


class PythonScriptRuntime(ScriptRuntime):
    """
    Evaluates Python expressions against the bound model.

    Sources are parsed with `ast`, checked, compiled once and cached.
    Imports and underscore-prefixed names or attributes are rejected.
    """

    def __init__(self, config: ScriptRuntimeConfig = None):
        self.config = config or ScriptRuntimeConfig()
        self._builtins = {name: getattr(builtins, name) for name in self.config.builtins}
        self._model = _ModelView({})
        self._compiled: Dict[Tuple[str, str], CodeType] = {}

    def set_model(self, model: ScriptTable):
        self._model = _ModelView(model.to_dict())
        logger.debug(f"Script model set with {len(model)} field(s)")

    # -------------------------------------------------------------------------
    # Typed Evaluation
    # -------------------------------------------------------------------------

    def eval_bool(self, source: str) -> bool:
        value = self._eval(source)
        if not isinstance(value, bool):
            raise ScriptError(f"Script did not return a bool, got {type(value).__name__}", source)
        return value

    def eval_integer(self, source: str) -> int:
        value = self._eval(source)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ScriptError(f"Script did not return an integer, got {type(value).__name__}", source)
        return value

    def eval_float(self, source: str) -> float:
        value = self._eval(source)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ScriptError(f"Script did not return a float, got {type(value).__name__}", source)
        return float(value)

    def eval_string(self, source: str) -> str:
        value = self._eval(source)
        if not isinstance(value, str):
            raise ScriptError(f"Script did not return a string, got {type(value).__name__}", source)
        return value

    def run_statement(self, source: str, emit: EmitFn):
        code = self._compile(source, "exec")
        namespace = self._namespace()
        namespace[self.config.emit_name] = emit
        try:
            exec(code, namespace)
        except Exception as e:
            raise ScriptError(f"Script failed: {e}", source) from e

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _namespace(self) -> Dict[str, Any]:
        return {
            "__builtins__": self._builtins,
            self.config.model_name: self._model,
        }

    def _eval(self, source: str) -> Any:
        code = self._compile(source, "eval")
        try:
            return eval(code, self._namespace())
        except Exception as e:
            raise ScriptError(f"Script failed: {e}", source) from e

    def _compile(self, source: str, mode: str) -> CodeType:
        key = (source, mode)
        code = self._compiled.get(key)
        if code is not None:
            return code

        try:
            tree = ast.parse(textwrap.dedent(source).strip(), mode=mode)
        except SyntaxError as e:
            raise ScriptError(f"Invalid script syntax: {e.msg}", source) from e

        self._check(tree, source)
        code = compile(tree, "<template script>", mode)
        self._compiled[key] = code
        return code

    def _check(self, tree: ast.AST, source: str):
        for node in ast.walk(tree):
            if isinstance(node, (ast.Import, ast.ImportFrom)):
                raise ScriptError("Imports are not allowed in scripts", source)
            if isinstance(node, ast.Attribute) and node.attr.startswith("_"):
                raise ScriptError(f"Access to \"{node.attr}\" is not allowed", source)
            if isinstance(node, ast.Name) and node.id.startswith("_"):
                raise ScriptError(f"Access to \"{node.id}\" is not allowed", source)
