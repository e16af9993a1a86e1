"""Type-guarded readers for untrusted agent JSON.

Each reader accepts a value of any shape and returns either the value
(when its runtime type matches) or the supplied default. None of them
raise.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

_EMPTY: Mapping[str, Any] = {}


def as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else _EMPTY


def is_number(value: Any) -> bool:
    """Finite int or float. Bools are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def as_int(value: Any, default: int = 0) -> int:
    # floats are truncated toward zero
    return int(value) if is_number(value) else default


def as_str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def as_seq(value: Any) -> tuple[Any, ...]:
    # Only ordered array-like values; strings and mappings are discarded, not split
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return ()


def text_field(raw: Any, key: str) -> str:
    return as_str(as_mapping(raw).get(key))
