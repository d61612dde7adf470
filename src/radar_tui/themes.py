from __future__ import annotations

import logging
from typing import Dict

from .config import THEME_PATH, read_json_slot, write_json_slot

logger = logging.getLogger("radar")

# --- Theme Configuration ---
DEFAULT_THEME = "light"
THEME_CHOICES = ("light", "dark")

# Preference -> Textual built-in theme name
TEXTUAL_THEMES: Dict[str, str] = {
    "light": "textual-light",
    "dark": "textual-dark",
}


class ThemePreference:
    """The persisted light/dark choice."""

    def __init__(self, path: str = THEME_PATH):
        self.path = path

    def load(self) -> str:
        value, problem = read_json_slot(self.path)
        if problem:
            logger.warning("Theme preference %s: %s", self.path, problem)
            return DEFAULT_THEME
        if value is None:
            return DEFAULT_THEME
        if value not in THEME_CHOICES:
            logger.warning("Ignoring unknown theme preference %r", value)
            return DEFAULT_THEME
        return value

    def save(self, theme: str) -> None:
        if theme not in THEME_CHOICES:
            raise ValueError(f"Unknown theme: {theme}")
        write_json_slot(self.path, theme)

    def toggle(self) -> str:
        theme = "light" if self.load() == "dark" else "dark"
        self.save(theme)
        return theme


def textual_theme(preference: str) -> str:
    return TEXTUAL_THEMES.get(preference, TEXTUAL_THEMES[DEFAULT_THEME])
