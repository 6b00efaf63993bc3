"""Light/dark theme preference.

The theme is an explicit :class:`ThemeConfig` value rather than global
state.  Persistence goes through any object implementing
:class:`KeyValueStore`: :class:`MemoryStore` lives as long as the
object, :class:`JsonFileStore` keeps preferences on disk across
sessions.

The browser side is kept to a small script (:data:`THEME_SCRIPT`) that
reports the system ``prefers-color-scheme`` value, including later
changes, and applies the attributes from :func:`apply_theme` to the
document root.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Protocol

from .config import (
    SYSTEM_THEME_INPUT,
    THEME_MESSAGE,
    THEME_STATE_FILE,
    THEME_STORAGE_KEY,
    ThemeName,
)

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


def _resolve_state_dir() -> Path:
    """Select a writable directory for UI preferences.

    The lookup order is:

    1. The ``COVIDVIZ_STATE_DIR`` environment variable, if set.
    2. A ``covidviz`` folder in the temporary directory.

    The first candidate that can be created is returned.
    """
    candidates: list[Path] = []
    env = os.getenv("COVIDVIZ_STATE_DIR")
    if env:
        candidates.append(Path(env).expanduser().resolve())
    candidates.append(Path(tempfile.gettempdir()) / "covidviz")

    for path in candidates:
        try:
            path.mkdir(parents=True, exist_ok=True)
            return path
        except OSError as exc:
            logger.warning("State directory %s not usable: %s", path, exc)
    return candidates[-1]


class JsonFileStore:
    """Key/value pairs kept in a small JSON file.

    Unreadable or missing files behave as an empty store; write failures
    are logged and the value is still kept in memory.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else _resolve_state_dir() / THEME_STATE_FILE
        self._data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(self._data), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            logger.warning("Could not write preferences file %s: %s", self.path, exc)


@dataclass(frozen=True)
class ThemeConfig:
    dark: bool = False

    @property
    def name(self) -> ThemeName:
        return "dark" if self.dark else "light"

    @property
    def css_class(self) -> str:
        return f"theme-{self.name}"

    @property
    def plotly_template(self) -> str:
        return "plotly_dark" if self.dark else "plotly_white"


def init_theme(store: KeyValueStore, prefers_dark: bool = False) -> ThemeConfig:
    """A saved preference wins; otherwise follow the system preference."""
    saved = store.get(THEME_STORAGE_KEY)
    if saved:
        return ThemeConfig(dark=saved == "dark")
    return ThemeConfig(dark=prefers_dark)


def follow_system_theme(
    config: ThemeConfig, store: KeyValueStore, prefers_dark: bool
) -> ThemeConfig:
    """React to a system preference change.

    Only applies while no theme has been explicitly saved.
    """
    if store.get(THEME_STORAGE_KEY):
        return config
    return ThemeConfig(dark=prefers_dark)


def set_theme(name: str, store: KeyValueStore) -> ThemeConfig:
    config = ThemeConfig(dark=name == "dark")
    store.set(THEME_STORAGE_KEY, config.name)
    return config


def toggle_theme(config: ThemeConfig, store: KeyValueStore) -> ThemeConfig:
    return set_theme("light" if config.dark else "dark", store)


def apply_theme(config: ThemeConfig) -> Dict[str, str]:
    """Attributes to set on the document root element."""
    return {"class": config.css_class, "data-bs-theme": config.name}


THEME_SCRIPT: str = f"""
(function () {{
  var query = window.matchMedia('(prefers-color-scheme: dark)');
  function report() {{
    Shiny.setInputValue('{SYSTEM_THEME_INPUT}', query.matches, {{priority: 'event'}});
  }}
  $(document).on('shiny:connected', function () {{
    Shiny.addCustomMessageHandler('{THEME_MESSAGE}', function (attrs) {{
      var root = document.documentElement;
      root.classList.remove('theme-dark', 'theme-light');
      root.classList.add(attrs['class']);
      root.setAttribute('data-bs-theme', attrs['data-bs-theme']);
    }});
    report();
    query.addEventListener('change', report);
  }});
}})();
"""
