"""Serializer: Value tree -> indentation-structured text."""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any

from .errors import SerializeError
from .lines import INDENT_UNIT
from .scalars import INT_MAX, INT_MIN, coerce_scalar, escape_double
from .values import (
    VBool,
    VFloat,
    VInt,
    VMap,
    VNull,
    VSeq,
    VStr,
    Value,
    from_python,
)

_FLOAT_RE = re.compile(r"^[-+]?[0-9]*\.[0-9]+$")

# Characters that force a string into double quotes.
_QUOTE_TRIGGERS = re.compile(r"[:\-#\s\"'\\]")

# Characters a key cannot contain and still re-read as the same key.
_BAD_KEY_CHARS = re.compile(r"[:#\"'\r\n\t]")


def serialize(value: Value | Any, indent_level: int = 0) -> str:
    """Render *value* as text that :func:`plumar_core.parse` reads back.

    *value* may be a Value tree or plain Python data.  A mapping renders
    as ``key: scalar`` lines with nested blocks one level deeper; a
    sequence renders as ``- scalar`` / ``-`` lines.  A bare scalar
    renders as its literal text with no newline.
    """
    value = from_python(value)
    if not isinstance(value, (VMap, VSeq)):
        return format_scalar(value)

    out: list[str] = []
    # LIFO work list of finished text and (container, level) pairs still
    # to expand; pushed in reverse so output keeps document order.
    work: list[str | tuple[VMap | VSeq, int]] = [(value, indent_level)]
    while work:
        item = work.pop()
        if isinstance(item, str):
            out.append(item)
            continue
        node, level = item
        pending = _expand(node, level)
        work.extend(reversed(pending))
    return "".join(out)


def _expand(node: VMap | VSeq, level: int) -> list[str | tuple[VMap | VSeq, int]]:
    """Lines for one container; nested blocks are left as work items."""
    spaces = " " * (INDENT_UNIT * level)
    pending: list[str | tuple[VMap | VSeq, int]] = []
    if isinstance(node, VMap):
        for key, item in node.entries.items():
            _check_key(key)
            if _is_block(item):
                pending.append(f"{spaces}{key}:\n")
                pending.append((item, level + 1))
            else:
                pending.append(f"{spaces}{key}: {format_scalar(item)}\n")
    else:
        for item in node.items:
            if _is_block(item):
                pending.append(f"{spaces}-\n")
                pending.append((item, level + 1))
            else:
                pending.append(f"{spaces}- {format_scalar(item)}\n")
    return pending


def _is_block(value: Value) -> bool:
    return isinstance(value, VMap) or (isinstance(value, VSeq) and bool(value.items))


def format_scalar(value: Value) -> str:
    """Literal text for a scalar or an empty container."""
    if isinstance(value, VNull):
        return "null"
    if isinstance(value, VBool):
        return "true" if value.value else "false"
    if isinstance(value, VInt):
        if not INT_MIN <= value.value <= INT_MAX:
            raise SerializeError(f"integer out of 64-bit range: {value.value}")
        return str(value.value)
    if isinstance(value, VFloat):
        return _format_float(value.value)
    if isinstance(value, VStr):
        return _format_str(value.value)
    if isinstance(value, VSeq):
        if value.items:
            raise SerializeError("non-empty sequence is not a scalar")
        return "[]"
    if isinstance(value, VMap):
        if value.entries:
            raise SerializeError("non-empty mapping is not a scalar")
        return "{}"
    raise TypeError(f"not a Value: {type(value).__name__}")


def _format_float(number: float) -> str:
    if not math.isfinite(number):
        raise SerializeError(f"non-finite float cannot be written: {number!r}")
    text = repr(number)
    if _FLOAT_RE.match(text):
        return text
    # Exponent form (1e-07, 1e+16) does not re-read as a float.
    text = format(Decimal(text), "f")
    if "." not in text:
        text += ".0"
    return text


def _format_str(text: str) -> str:
    if text and not _QUOTE_TRIGGERS.search(text) and isinstance(
        coerce_scalar(text), VStr
    ):
        return text
    return f'"{escape_double(text)}"'


def _check_key(key: str) -> None:
    if not isinstance(key, str):
        raise TypeError(f"mapping keys must be str, got {type(key).__name__}")
    if (
        not key
        or key != key.strip()
        or _BAD_KEY_CHARS.search(key)
        or key == "-"
        or key.startswith("- ")
    ):
        raise SerializeError(f"key cannot be written without changing it: {key!r}")
