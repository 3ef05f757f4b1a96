"""Scripting runtime capability and the model handed to it."""

from trellis.scripting.model import ScriptTable, ScriptValue
from trellis.scripting.runtime import (
    ScriptRuntime, PythonScriptRuntime, ScriptRuntimeConfig, EmitFn,
)

__all__ = [
    "ScriptTable", "ScriptValue",
    "ScriptRuntime", "PythonScriptRuntime", "ScriptRuntimeConfig", "EmitFn",
]
