"""
Dotted-path field extraction over decoded JSON.
Absence (missing key, null, wrong type, non-finite number, index out of range) is a
value, not an error: every lookup returns None instead of raising.
"""
import math
from typing import Any, Optional, Type


def _step(node: Any, segment: str) -> Any:
    if isinstance(node, dict):
        return node.get(segment)
    if isinstance(node, list) and segment.isdigit():
        idx = int(segment)
        return node[idx] if idx < len(node) else None
    return None


def _coerce(value: Any, kind: Optional[Type]) -> Any:
    if kind is None:
        return value
    # bool is a subclass of int, never accept it as a number
    if isinstance(value, bool):
        return None
    if kind is float:
        if not isinstance(value, (int, float)):
            return None
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    if kind is int:
        return value if isinstance(value, int) else None
    return value if isinstance(value, kind) else None


def extract(doc: Any, path: str, kind: Optional[Type] = None) -> Any:
    """
    Walk `doc` along `path` ("pool.networkStats.blockHeight", "0.status").

    Numeric segments index into lists. When `kind` is given (int, float, str) the
    leaf must have that type; ints are widened for float. Returns None when any
    segment is missing or the leaf has the wrong type.
    """
    node = doc
    for segment in path.split("."):
        node = _step(node, segment)
        if node is None:
            return None
    return _coerce(node, kind)


def extract_int(doc: Any, path: str) -> Optional[int]:
    return extract(doc, path, int)


def extract_float(doc: Any, path: str) -> Optional[float]:
    return extract(doc, path, float)


def extract_str(doc: Any, path: str) -> Optional[str]:
    return extract(doc, path, str)
