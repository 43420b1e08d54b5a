"""Scalar coercion: raw text fragment -> typed Value."""

from __future__ import annotations

import math
import re

from .values import Null, Value, VBool, VFloat, VInt, VMap, VSeq, VStr

_INT_RE = re.compile(r"^[-+]?[0-9]+$")
_FLOAT_RE = re.compile(r"^[-+]?[0-9]*\.[0-9]+$")

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1
_INT_MAX_DIGITS = len(str(INT_MAX))

# Escapes understood inside double quotes; the serializer emits exactly these.
_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}


def coerce_scalar(text: str) -> Value:
    """Convert a trimmed, non-empty fragment to a Value.

    First match wins:

    - ``[]`` / ``{}``          → empty VSeq / VMap
    - ``~`` / ``null``         → Null
    - ``true`` / ``false``     → VBool
    - ``[+-]digits``           → VInt (64-bit range only)
    - ``[+-]digits.digits``    → VFloat
    - ``"..."`` / ``'...'``    → VStr with the quotes removed
    - anything else            → VStr verbatim

    ``null``, ``true`` and ``false`` are case-insensitive.  A quoted
    fragment starts with a quote, so it never reaches the numeric rules.
    """
    if text == "[]":
        return VSeq()
    if text == "{}":
        return VMap()
    lowered = text.lower()
    if text == "~" or lowered == "null":
        return Null
    if lowered == "true":
        return VBool(True)
    if lowered == "false":
        return VBool(False)
    if _INT_RE.match(text):
        # longer digit runs cannot fit in 64 bits; skip int() on them
        digits = text.lstrip("+-").lstrip("0") or "0"
        if len(digits) <= _INT_MAX_DIGITS:
            number = -int(digits) if text[0] == "-" else int(digits)
            if INT_MIN <= number <= INT_MAX:
                return VInt(number)
    if _FLOAT_RE.match(text):
        number = float(text)
        if math.isfinite(number):
            return VFloat(number)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        inner = text[1:-1]
        if text[0] == '"':
            inner = unescape_double(inner)
        return VStr(inner)
    return VStr(text)


def unescape_double(text: str) -> str:
    """Decode the backslash escapes of a double-quoted scalar.

    Unknown escapes are kept as written.
    """
    if "\\" not in text:
        return text
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1] in _ESCAPES:
            out.append(_ESCAPES[text[i + 1]])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def escape_double(text: str) -> str:
    """Inverse of :func:`unescape_double`."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
