"""Plumar Core — parser and serializer for Plumar's indentation-structured config files."""

from .values import (
    Null,
    Value,
    VBool,
    VFloat,
    VInt,
    VMap,
    VNull,
    VSeq,
    VStr,
    from_python,
    to_python,
)
from .errors import (
    ConfigError,
    ErrorCode,
    ParseError,
    ParseErrorKind,
    PlumarError,
    SerializeError,
)
from .parser import parse
from .serializer import serialize
from .config import ConfigManager
from .theme import ThemeManager

__all__ = [
    "parse",
    "serialize",
    "Null",
    "Value",
    "VBool",
    "VFloat",
    "VInt",
    "VMap",
    "VNull",
    "VSeq",
    "VStr",
    "from_python",
    "to_python",
    "ConfigError",
    "ErrorCode",
    "ParseError",
    "ParseErrorKind",
    "PlumarError",
    "SerializeError",
    "ConfigManager",
    "ThemeManager",
]
