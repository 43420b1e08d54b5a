"""Dotted-path access into configuration trees (plain Python data)."""

from __future__ import annotations

from typing import Any

from .errors import ErrorCode, PlumarError

_MISSING = object()


def get_path(tree: Any, path: str, default: Any = None) -> Any:
    """Resolve ``a.b.0`` style *path* against *tree*.

    - dict: key lookup
    - list: 0-based integer index
    - anything else, or a missing step: *default*
    """
    current = tree
    for step in path.split("."):
        current = _step(current, step)
        if current is _MISSING:
            return default
    return current


def _step(value: Any, step: str) -> Any:
    if isinstance(value, dict):
        return value.get(step, _MISSING)
    if isinstance(value, list):
        try:
            idx = int(step)
        except ValueError:
            return _MISSING
        if 0 <= idx < len(value):
            return value[idx]
    return _MISSING


def set_path(tree: dict[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Set *value* at *path*, creating intermediate mappings as needed.

    An intermediate that exists but is not a mapping is replaced by one.
    Returns *tree* (mutated in place).
    """
    keys = path.split(".")
    if not all(keys):
        raise PlumarError(
            f"invalid config path: {path!r}",
            ErrorCode.CONFIG_INVALID,
            ["use dot-separated keys, e.g. deploy.branch"],
        )
    current = tree
    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]
    current[keys[-1]] = value
    return tree
