"""Theme metadata stored as ``theme.info.yml`` / ``theme.config.yml``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import ConfigManager
from .errors import ConfigError, ErrorCode, PlumarError
from .parser import parse
from .serializer import serialize
from .values import to_python

log = logging.getLogger(__name__)

INFO_FILENAME = "theme.info.yml"
CONFIG_FILENAME = "theme.config.yml"


class ThemeManager:
    """Lists themes and reads/writes their metadata files.

    Parse errors in theme files propagate to the caller.
    """

    def __init__(self, themes_dir: str | Path) -> None:
        self.themes_dir = Path(themes_dir)

    def theme_path(self, name: str) -> Path:
        return self.themes_dir / name

    def theme_exists(self, name: str) -> bool:
        return (self.theme_path(name) / INFO_FILENAME).is_file()

    def list_themes(self) -> list[dict[str, Any]]:
        """Every theme directory that carries an info file, sorted by name."""
        if not self.themes_dir.is_dir():
            return []
        themes = []
        for entry in sorted(self.themes_dir.iterdir()):
            if entry.is_dir() and self.theme_exists(entry.name):
                info = self.load_info(entry.name)
                themes.append({**info, "name": entry.name, "path": str(entry)})
        return themes

    def load_info(self, name: str) -> dict[str, Any]:
        path = self.theme_path(name) / INFO_FILENAME
        if not path.is_file():
            return {
                "name": name,
                "version": "1.0.0",
                "description": "unknown theme",
                "author": "unknown",
                "features": [],
            }
        return self._read(path)

    def load_theme_config(self, name: str) -> dict[str, Any]:
        path = self.theme_path(name) / CONFIG_FILENAME
        if not path.is_file():
            return {}
        return self._read(path)

    def save_info(self, name: str, info: dict[str, Any]) -> Path:
        path = self.theme_path(name) / INFO_FILENAME
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(serialize(info), encoding="utf-8")
        log.info("theme info written to %s", path)
        return path

    def set_theme(self, config_manager: ConfigManager, name: str) -> None:
        """Switch the site to theme *name* and persist the site config."""
        if not self.theme_exists(name):
            raise PlumarError(
                f'theme "{name}" does not exist',
                ErrorCode.THEME_NOT_FOUND,
                [f"available themes: {', '.join(t['name'] for t in self.list_themes()) or '(none)'}"],
            )
        config_manager.set("theme", name)
        log.info("theme set to %s", name)

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot read {path}", str(path), exc) from exc
        return to_python(parse(text, file_identity=str(path), context_label="theme"))
