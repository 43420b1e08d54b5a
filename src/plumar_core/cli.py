"""``plumar-config`` command: inspect, edit and validate configuration files.

Also runnable as ``python -m plumar_core.cli``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import IO, Any

from .config import ConfigManager, coerce_cli_value
from .errors import ConfigError, ParseError, PlumarError
from .parser import parse
from .serializer import format_scalar, serialize
from .values import from_python

log = logging.getLogger(__name__)

_MISSING = object()


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _fmt_value(path: str, value: Any) -> str:
    """``path: scalar`` on one line, or ``path:`` followed by an indented block."""
    if isinstance(value, (dict, list)):
        if not value:
            return f"{path}: {format_scalar(from_python(value))}"
        return f"{path}:\n{serialize(value, 1)}".rstrip("\n")
    return f"{path}: {serialize(value)}"


def _check_file(path: Path, dest: IO[str]) -> bool:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"{path}: cannot read: {exc}", file=dest)
        return False
    try:
        parse(text, file_identity=str(path), context_label="config")
    except ParseError as exc:
        print(exc.user_friendly_message(), file=dest)
        return False
    print(f"{path}: ok", file=dest)
    return True


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _cmd_show(manager: ConfigManager, args: argparse.Namespace, dest: IO[str]) -> int:
    dest.write(serialize(manager.load()))
    return 0


def _cmd_get(manager: ConfigManager, args: argparse.Namespace, dest: IO[str]) -> int:
    value = manager.get(args.path, _MISSING)
    if value is _MISSING:
        print(f'config key "{args.path}" does not exist', file=sys.stderr)
        return 1
    print(_fmt_value(args.path, value), file=dest)
    return 0


def _cmd_set(manager: ConfigManager, args: argparse.Namespace, dest: IO[str]) -> int:
    value = coerce_cli_value(args.value)
    manager.set(args.path, value)
    print(f"updated {_fmt_value(args.path, value)}", file=dest)
    return 0


def _cmd_reset(manager: ConfigManager, args: argparse.Namespace, dest: IO[str]) -> int:
    manager.reset()
    print(f"reset {manager.config_path} to defaults", file=dest)
    return 0


def _cmd_init(manager: ConfigManager, args: argparse.Namespace, dest: IO[str]) -> int:
    manager.init()
    print(f"wrote {manager.config_path}", file=dest)
    return 0


def _cmd_check(manager: ConfigManager, args: argparse.Namespace, dest: IO[str]) -> int:
    files = args.files or [manager.config_path]
    results = [_check_file(Path(f), dest) for f in files]
    return 0 if all(results) else 1


def _cmd_dump(manager: ConfigManager, args: argparse.Namespace, dest: IO[str]) -> int:
    path = Path(args.file)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read {path}", str(path), exc) from exc
    document = parse(text, file_identity=str(path))
    dest.write(serialize(document))
    return 0


_COMMANDS = {
    "show": _cmd_show,
    "get": _cmd_get,
    "set": _cmd_set,
    "reset": _cmd_reset,
    "init": _cmd_init,
    "check": _cmd_check,
    "dump": _cmd_dump,
}


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plumar-config", description="Manage plumar.config.yml"
    )
    parser.add_argument("-f", "--file", help="config file (default: ./plumar.config.yml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("show", help="print the merged configuration")
    get = sub.add_parser("get", help="print one value by dotted path")
    get.add_argument("path")
    set_ = sub.add_parser("set", help="set one value by dotted path")
    set_.add_argument("path")
    set_.add_argument("value")
    sub.add_parser("reset", help="overwrite the file with the defaults")
    sub.add_parser("init", help="write the merged configuration to the file")
    check = sub.add_parser("check", help="validate one or more files")
    check.add_argument("files", nargs="*")
    dump = sub.add_parser("dump", help="re-serialize a file to stdout")
    dump.add_argument("file")
    return parser


def main(argv: list[str] | None = None, dest: IO[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    dest = dest or sys.stdout

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    manager = ConfigManager(path=args.file)

    command = _COMMANDS[args.command or "show"]
    try:
        return command(manager, args, dest)
    except PlumarError as exc:
        log.debug("command %s failed", args.command, exc_info=True)
        print(exc.user_friendly_message(), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
