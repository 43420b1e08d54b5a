"""Site configuration: load with defaults, persist, dotted get/set."""

from __future__ import annotations

import copy
import logging
import os
import re
from pathlib import Path
from typing import Any

from .errors import ConfigError, ParseError
from .parser import parse
from .paths import get_path, set_path
from .serializer import serialize
from .values import to_python

log = logging.getLogger(__name__)

CONFIG_FILENAME = "plumar.config.yml"
CONFIG_ENV_VAR = "PLUMAR_CONFIG"

DEFAULT_CONFIG: dict[str, Any] = {
    # site
    "title": "My Blog",
    "subtitle": "",
    "description": "A blog built with Astro and Plumar",
    "keywords": [],
    "author": "",
    "language": "en",
    "timezone": "UTC",
    # url
    "url": "https://your-site.com",
    "root": "/",
    "permalink": ":year/:month/:day/:title/",
    # directories
    "source_dir": "src/content/blog",
    "public_dir": "dist",
    # writing
    "new_post_name": ":year-:month-:day-:title.md",
    "default_layout": "post",
    "filename_case": 0,
    "render_drafts": False,
    # categories & tags
    "default_category": "uncategorized",
    "category_map": {},
    "tag_map": {},
    # date / time
    "date_format": "YYYY-MM-DD",
    "time_format": "HH:mm:ss",
    # pagination
    "per_page": 10,
    "pagination_dir": "page",
    # extensions
    "theme": "",
    "deploy": {},
}

_INT_RE = re.compile(r"^[0-9]+$")
_FLOAT_RE = re.compile(r"^[0-9]+\.[0-9]+$")


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge *source* into *target* in place.

    Mappings merge recursively; lists and scalars from *source* replace.
    """
    work = [(target, source)]
    while work:
        dest, src = work.pop()
        for key, value in src.items():
            if isinstance(value, dict):
                if not isinstance(dest.get(key), dict):
                    dest[key] = {}
                work.append((dest[key], value))
            else:
                dest[key] = value
    return target


def coerce_cli_value(text: str) -> Any:
    """Type a value typed on the command line.

    ``true``/``false`` → bool, digits → int, ``digits.digits`` → float,
    anything containing a comma → list of trimmed strings, else str.
    """
    if text == "true":
        return True
    if text == "false":
        return False
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    if "," in text:
        return [item.strip() for item in text.split(",")]
    return text


class ConfigManager:
    """Reads and writes ``plumar.config.yml`` for one site root."""

    def __init__(
        self,
        root: str | Path | None = None,
        filename: str = CONFIG_FILENAME,
        path: str | Path | None = None,
    ) -> None:
        # explicit path, then $PLUMAR_CONFIG, then <root>/<filename>
        override = path or os.environ.get(CONFIG_ENV_VAR)
        if override:
            self.config_path = Path(override)
        else:
            self.config_path = Path(root if root is not None else Path.cwd()) / filename
        self.default_config = copy.deepcopy(DEFAULT_CONFIG)

    # -- Loading --------------------------------------------------------

    def read_user_config(self) -> dict[str, Any]:
        """Parse the config file as written, without defaults.

        Raises ParseError for malformed text and ConfigError when the file
        cannot be read.
        """
        try:
            text = self.config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot read {self.config_path}", str(self.config_path), exc) from exc
        document = parse(text, file_identity=str(self.config_path), context_label="config")
        return to_python(document)

    def load(self, strict: bool = False) -> dict[str, Any]:
        """Return defaults merged with the user's file.

        A missing file yields the defaults.  A malformed file is logged and
        the defaults are returned, unless *strict* is set, in which case the
        ParseError propagates.
        """
        config = copy.deepcopy(self.default_config)
        if not self.config_path.exists():
            log.debug("no config at %s, using defaults", self.config_path)
            return config
        try:
            user = self.read_user_config()
        except ParseError as exc:
            if strict:
                raise
            log.warning(
                "failed to load %s (line %s): %s; using defaults",
                exc.file_identity,
                exc.line,
                exc.cause,
            )
            return config
        return deep_merge(config, user)

    # -- Persisting -----------------------------------------------------

    def save(self, config: dict[str, Any]) -> None:
        text = serialize(config)
        try:
            self.config_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot write {self.config_path}", str(self.config_path), exc) from exc
        log.info("configuration saved to %s", self.config_path)

    def reset(self) -> None:
        self.save(self.default_config)

    def init(self) -> dict[str, Any]:
        config = self.load(strict=True)
        self.save(config)
        return config

    # -- Dotted access --------------------------------------------------

    def get(self, path: str, default: Any = None) -> Any:
        return get_path(self.load(), path, default)

    def set(self, path: str, value: Any) -> dict[str, Any]:
        config = self.load(strict=True)
        set_path(config, path, value)
        self.save(config)
        return config
