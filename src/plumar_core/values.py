"""Value types for Plumar configuration documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


class VNull:
    """Singleton for ``null`` / ``~``."""

    _instance: "VNull | None" = None

    def __new__(cls) -> "VNull":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Null"

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "null"


Null = VNull()


@dataclass
class VBool:
    value: bool

    def __str__(self) -> str:
        return str(self.value).lower()


@dataclass
class VInt:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class VFloat:
    value: float

    def __str__(self) -> str:
        return repr(self.value)


@dataclass
class VStr:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass
class VSeq:
    items: list["Value"] = field(default_factory=list)

    def __str__(self) -> str:
        return "[" + ", ".join(str(v) for v in self.items) + "]"


@dataclass
class VMap:
    entries: dict[str, "Value"] = field(default_factory=dict)

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.entries.items()) + "}"

    def __getitem__(self, key: str) -> "Value":
        return self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)


Value = Union[VNull, VBool, VInt, VFloat, VStr, VSeq, VMap]


# ---------------------------------------------------------------------------
# Conversions to and from plain Python data
# ---------------------------------------------------------------------------

def from_python(obj: Any) -> Value:
    """Convert plain Python data into a Value tree.

    Values that are already ``Value`` instances pass through unchanged.
    Raises ``TypeError`` for anything the document model cannot hold.
    Nested containers are walked with an explicit stack.
    """
    root = _node_from_python(obj)
    work = [(obj, root)] if isinstance(obj, (list, tuple, dict)) else []
    while work:
        src, dest = work.pop()
        if isinstance(src, dict):
            for key, item in src.items():
                if not isinstance(key, str):
                    raise TypeError(
                        f"mapping keys must be str, got {type(key).__name__}: {key!r}"
                    )
                child = _node_from_python(item)
                dest.entries[key] = child
                if isinstance(item, (list, tuple, dict)):
                    work.append((item, child))
        else:
            for item in src:
                child = _node_from_python(item)
                dest.items.append(child)
                if isinstance(item, (list, tuple, dict)):
                    work.append((item, child))
    return root


def _node_from_python(obj: Any) -> Value:
    """One level of conversion: containers come back empty."""
    if isinstance(obj, (VNull, VBool, VInt, VFloat, VStr, VSeq, VMap)):
        return obj
    if obj is None:
        return Null
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return VBool(obj)
    if isinstance(obj, int):
        return VInt(obj)
    if isinstance(obj, float):
        return VFloat(obj)
    if isinstance(obj, str):
        return VStr(obj)
    if isinstance(obj, (list, tuple)):
        return VSeq()
    if isinstance(obj, dict):
        return VMap()
    raise TypeError(f"unsupported value type: {type(obj).__name__}")


def to_python(value: Value) -> Any:
    """Convert a Value tree into plain dicts, lists and scalars."""
    root = _node_to_python(value)
    work = [(value, root)] if isinstance(value, (VSeq, VMap)) else []
    while work:
        src, dest = work.pop()
        if isinstance(src, VMap):
            for key, item in src.entries.items():
                child = _node_to_python(item)
                dest[key] = child
                if isinstance(item, (VSeq, VMap)):
                    work.append((item, child))
        else:
            for item in src.items:
                child = _node_to_python(item)
                dest.append(child)
                if isinstance(item, (VSeq, VMap)):
                    work.append((item, child))
    return root


def _node_to_python(value: Value) -> Any:
    if isinstance(value, VNull):
        return None
    if isinstance(value, (VBool, VInt, VFloat, VStr)):
        return value.value
    if isinstance(value, VSeq):
        return []
    if isinstance(value, VMap):
        return {}
    raise TypeError(f"not a Value: {type(value).__name__}")
