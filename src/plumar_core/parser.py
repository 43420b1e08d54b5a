"""Indentation-stack parser: preprocessed lines -> VMap document.

The parser walks lines with an explicit stack of frames and never
recurses.  Frames refer to their containers through integer handles into
a per-call arena.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import ParseError, ParseErrorKind
from .lines import INDENT_UNIT, Line, is_dash_item, peek_meaningful, split_lines
from .scalars import coerce_scalar
from .values import VMap, VSeq


class _LineError(Exception):
    """Structural failure on the current line; decorated by ``parse``."""

    def __init__(self, kind: ParseErrorKind, cause: str) -> None:
        super().__init__(cause)
        self.kind = kind
        self.cause = cause


@dataclass
class Frame:
    indent: int
    node: int  # handle into _Arena.nodes


@dataclass
class _Arena:
    nodes: list[VSeq | VMap] = field(default_factory=list)

    def add(self, node: VSeq | VMap) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def __getitem__(self, handle: int) -> VSeq | VMap:
        return self.nodes[handle]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def parse(
    text: str,
    file_identity: str = "<string>",
    context_label: str = "document",
    *,
    strict_keys: bool = False,
) -> VMap:
    """Parse *text* and return the root mapping.

    Fails on the first structural error with a :class:`ParseError` that
    names *file_identity*, *context_label* and the 1-based line number.
    With ``strict_keys`` a key repeated in one mapping is an error;
    otherwise the later value wins.
    """
    if not isinstance(text, str):
        raise ParseError(
            f"expected text, got {type(text).__name__}",
            ParseErrorKind.INVALID_INPUT,
            file_identity=file_identity,
            context_label=context_label,
        )

    lines = split_lines(text)
    arena = _Arena()
    root = VMap()
    stack = [Frame(indent=-1, node=arena.add(root))]

    for index, line in enumerate(lines):
        if line.is_blank:
            continue
        try:
            _parse_line(line, lines, index, stack, arena, strict_keys)
        except _LineError as exc:
            raise ParseError(
                exc.cause,
                exc.kind,
                file_identity=file_identity,
                line=line.number,
                context_label=context_label,
            ) from exc
        except Exception as exc:
            raise ParseError(
                f"{type(exc).__name__}: {exc}",
                ParseErrorKind.UNEXPECTED,
                file_identity=file_identity,
                line=line.number,
                context_label=context_label,
            ) from exc

    return root


# ---------------------------------------------------------------------------
# Per-line step
# ---------------------------------------------------------------------------

def _parse_line(
    line: Line,
    lines: list[Line],
    index: int,
    stack: list[Frame],
    arena: _Arena,
    strict_keys: bool,
) -> None:
    indent = line.indent
    if indent % INDENT_UNIT:
        raise _LineError(
            ParseErrorKind.INDENTATION,
            f"indentation of {indent} spaces is not a multiple of {INDENT_UNIT}",
        )

    # The root frame has indent -1, so it is never popped.
    while indent < stack[-1].indent:
        stack.pop()

    container = arena[stack[-1].node]
    content = line.content

    if is_dash_item(content):
        _parse_array_item(content, indent, lines, index, stack, arena)
        return

    key, rest = _split_pair(content)
    if key is None:
        raise _LineError(ParseErrorKind.MISSING_COLON, "missing key or colon")
    if not key:
        raise _LineError(ParseErrorKind.EMPTY_KEY, "empty key")
    if not isinstance(container, VMap):
        raise _LineError(
            ParseErrorKind.ARRAY_CONTEXT,
            f'key "{key}" inside a sequence; list items must start with "- "',
        )

    if strict_keys and key in container.entries:
        raise _LineError(ParseErrorKind.DUPLICATE_KEY, f'duplicate key "{key}"')
    if rest:
        container.entries[key] = coerce_scalar(rest)
        return

    child = _open_container(lines, index + 1, indent)
    container.entries[key] = child
    stack.append(Frame(indent=indent + INDENT_UNIT, node=arena.add(child)))


def _parse_array_item(
    content: str,
    indent: int,
    lines: list[Line],
    index: int,
    stack: list[Frame],
    arena: _Arena,
) -> None:
    container = arena[stack[-1].node]
    if not isinstance(container, VSeq):
        raise _LineError(
            ParseErrorKind.ARRAY_CONTEXT, "list item outside of a sequence"
        )

    payload = content[1:].strip()

    if not payload:
        item = _open_container(lines, index + 1, indent)
        container.items.append(item)
        stack.append(Frame(indent=indent + INDENT_UNIT, node=arena.add(item)))
        return

    key, rest = _split_pair(payload)
    if key is None:
        container.items.append(coerce_scalar(payload))
        return
    if not key:
        raise _LineError(ParseErrorKind.EMPTY_KEY, "empty key in list item")

    item_map = VMap()
    container.items.append(item_map)
    stack.append(Frame(indent=indent + INDENT_UNIT, node=arena.add(item_map)))

    if rest:
        item_map.entries[key] = coerce_scalar(rest)
        return

    # "- key:" with its block further in: the key sits one unit right of
    # the dash, so its children start two units right of it.
    key_indent = indent + INDENT_UNIT
    child = _open_container(lines, index + 1, key_indent)
    item_map.entries[key] = child
    stack.append(Frame(indent=key_indent + INDENT_UNIT, node=arena.add(child)))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _split_pair(text: str) -> tuple[str | None, str]:
    """Split at the first colon.

    A fragment that opens with a quote is skipped up to its closing quote
    first, so ``"a:b"`` stays whole.  Returns ``(None, "")`` when there is
    no colon to split at.
    """
    start = 0
    if text[:1] in ("'", '"'):
        start = _closing_quote(text) + 1
    colon = text.find(":", start)
    if colon == -1:
        return None, ""
    return text[:colon].strip(), text[colon + 1:].strip()


def _closing_quote(text: str) -> int:
    """Index of the quote closing ``text[0]``, or the last index if unclosed."""
    quote = text[0]
    i = 1
    while i < len(text):
        ch = text[i]
        if quote == '"' and ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i
        i += 1
    return len(text) - 1


def _open_container(lines: list[Line], start: int, indent: int) -> VSeq | VMap:
    """Pick the kind of a block opened at *indent* by peeking at its first line."""
    nxt = peek_meaningful(lines, start)
    if nxt is not None and nxt.indent > indent and is_dash_item(nxt.content):
        return VSeq()
    return VMap()
