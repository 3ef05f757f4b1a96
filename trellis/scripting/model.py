"""
Script Model

Values handed to the script runtime before each resolve pass.
"""

from __future__ import annotations
from typing import Dict, Iterator, Optional, Tuple, Union

# Values a model can hold
ScriptValue = Union[bool, str, int, float]

_ALLOWED_TYPES = (bool, str, int, float)


class ScriptTable:
    """
    Named values exposed to scripts as `model`.

    Usage:
        model = ScriptTable()
        model.set("logged_in", True)
        model.set("user", "ada")
    """

    def __init__(self, values: Optional[Dict[str, ScriptValue]] = None):
        self._values: Dict[str, ScriptValue] = {}
        if values:
            for key, value in values.items():
                self.set(key, value)

    def set(self, key: str, value: ScriptValue):
        """Set the field with the given key to the given value."""
        if not isinstance(value, _ALLOWED_TYPES):
            raise TypeError(
                f"Model value for \"{key}\" must be bool, str, int or float, "
                f"not {type(value).__name__}"
            )
        self._values[key] = value

    def get(self, key: str, default: Optional[ScriptValue] = None) -> Optional[ScriptValue]:
        return self._values.get(key, default)

    def items(self) -> Iterator[Tuple[str, ScriptValue]]:
        return iter(self._values.items())

    def to_dict(self) -> Dict[str, ScriptValue]:
        return dict(self._values)

    def __getitem__(self, key: str) -> ScriptValue:
        return self._values[key]

    def __setitem__(self, key: str, value: ScriptValue):
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScriptTable):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"ScriptTable({self._values!r})"
