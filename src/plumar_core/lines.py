"""Line preprocessing: tab normalisation, comment stripping, indentation."""

from __future__ import annotations

import re
from dataclasses import dataclass

INDENT_UNIT = 2

_NEWLINE_RE = re.compile(r"\r?\n")


@dataclass
class Line:
    number: int  # 1-based
    text: str  # comment stripped, tabs expanded, trailing space removed

    @property
    def indent(self) -> int:
        return len(self.text) - len(self.text.lstrip(" "))

    @property
    def content(self) -> str:
        return self.text.strip()

    @property
    def is_blank(self) -> bool:
        return not self.content


def normalize_tabs(line: str) -> str:
    return line.replace("\t", " " * INDENT_UNIT)


def strip_comment(line: str) -> str:
    """Drop an unquoted ``#`` and everything after it.

    Quote state is tracked per line only.  Inside double quotes a backslash
    escapes the next character; single-quoted text has no escapes.
    """
    in_single = False
    in_double = False
    i = 0
    while i < len(line):
        ch = line[i]
        if in_double and ch == "\\":
            i += 2
            continue
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == "#" and not in_single and not in_double:
            return line[:i]
        i += 1
    return line


def preprocess(raw: str) -> str:
    return strip_comment(normalize_tabs(raw)).rstrip()


def split_lines(text: str) -> list[Line]:
    """Split *text* on ``\\n`` / ``\\r\\n`` and preprocess every line."""
    return [
        Line(number=i, text=preprocess(raw))
        for i, raw in enumerate(_NEWLINE_RE.split(text), 1)
    ]


def peek_meaningful(lines: list[Line], start: int) -> Line | None:
    """Return the first non-blank line at or after *start* without consuming it."""
    for i in range(start, len(lines)):
        if not lines[i].is_blank:
            return lines[i]
    return None


def is_dash_item(content: str) -> bool:
    """True for ``- payload`` and for a lone ``-``."""
    return content == "-" or content.startswith("- ")
