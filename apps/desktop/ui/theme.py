"""
Stylesheet for the waiting window, with light and dark palettes.
"""

from __future__ import annotations

from typing import Literal

from PySide6.QtCore import Qt
from PySide6.QtGui import QGuiApplication

SPACING = {
    "sm": "8px",
    "md": "12px",
}

ACCENT = "#3584E4"

LIGHT_COLORS = {
    "background": "#FAFAFA",
    "text_primary": "#1E1E1E",
    "text_secondary": "#5E5C64",
}

DARK_COLORS = {
    "background": "#242424",
    "text_primary": "#FFFFFF",
    "text_secondary": "#9A9996",
}

ThemeMode = Literal["light", "dark"]


class Theme:
    """Theme manager providing the QSS stylesheet for the current mode."""

    def __init__(self, mode: ThemeMode = "light"):
        self.mode = mode
        self.colors = LIGHT_COLORS if mode == "light" else DARK_COLORS

    def get_stylesheet(self) -> str:
        colors = self.colors
        return f"""
        QWidget#WaitWindow {{
            background-color: {colors["background"]};
            border: 1px solid {self._rgba(ACCENT, 0.6)};
            border-radius: 6px;
        }}

        QWidget#MainContainer {{
            padding: {SPACING["md"]};
        }}

        QLabel#WaitingLabel {{
            color: {colors["text_primary"]};
        }}

        QPushButton {{
            padding: 4px {SPACING["md"]};
        }}
        """

    def _rgba(self, hex_color: str, alpha: float) -> str:
        hex_color = hex_color.lstrip("#")
        r, g, b = int(hex_color[0:2], 16), int(hex_color[2:4], 16), int(hex_color[4:6], 16)
        return f"rgba({r}, {g}, {b}, {alpha})"

    @classmethod
    def from_system(cls) -> "Theme":
        """Pick the mode matching the desktop colour scheme."""
        scheme = QGuiApplication.styleHints().colorScheme()
        return cls("dark" if scheme == Qt.ColorScheme.Dark else "light")
