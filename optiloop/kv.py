"""
Key-value diagnostic records attached to each iteration.

A KV is an ordered mapping from string keys to small scalar values
(int, float, str, bool). Solvers return one per iteration; the executor
merges in its own standard fields and hands the result to observers.
"""

from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

import numpy as np

KVValue = Union[bool, int, float, str]


def coerce_value(key: str, value: Any) -> KVValue:
    """
    Validate and normalize a KV value.

    numpy scalars are converted to the matching Python type. bool is
    checked before int since it is an int subclass.

    Raises:
        TypeError: If the value is not one of the supported scalar kinds.
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        return float(value)
    if isinstance(value, str):
        return value
    raise TypeError(
        f"KV value for '{key}' must be int, float, str or bool, "
        f"got {type(value).__name__}"
    )


class KV:
    """
    Ordered string-keyed record of iteration diagnostics.

    Example:
        >>> kv = KV().set("step_length", 0.5).set("line_search", "backtracking")
        >>> kv["step_length"]
        0.5
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, **pairs: Any):
        self._values: Dict[str, KVValue] = {}
        if values is not None:
            for key, value in values.items():
                self.set(key, value)
        for key, value in pairs.items():
            self.set(key, value)

    def set(self, key: str, value: Any) -> "KV":
        """Set a value, keeping the key's original position if it exists."""
        if not isinstance(key, str):
            raise TypeError(f"KV keys must be str, got {type(key).__name__}")
        self._values[key] = coerce_value(key, value)
        return self

    def get(self, key: str, default: Optional[KVValue] = None) -> Optional[KVValue]:
        return self._values.get(key, default)

    def copy(self) -> "KV":
        return KV(self._values)

    def merge(self, other: Optional["KV"]) -> "KV":
        """Return a new KV with other's entries layered over this one."""
        merged = KV(self._values)
        if other is not None:
            for key, value in other.items():
                merged.set(key, value)
        return merged

    def items(self) -> Iterator[Tuple[str, KVValue]]:
        return iter(self._values.items())

    def keys(self):
        return self._values.keys()

    def to_dict(self) -> Dict[str, KVValue]:
        return dict(self._values)

    def __getitem__(self, key: str) -> KVValue:
        return self._values[key]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KV):
            return NotImplemented
        return list(self._values.items()) == list(other._values.items())

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"KV({inner})"


def make_kv(**pairs: Any) -> KV:
    """Build a KV from keyword arguments, preserving argument order."""
    return KV(**pairs)
