"""
Small window shown while waiting for the presence file.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from PySide6.QtCore import QTimer, Qt
from PySide6.QtGui import QCloseEvent, QIcon, QKeyEvent
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from packages.core.watch.coordinator import WaitCoordinator

from .theme import Theme

log = logging.getLogger(__name__)

ICON_SIZE = 48
TICK_INTERVAL_MS = 300
PULSE_STEP = 7


def resolve_icon(icon_spec: Optional[str]) -> Optional[QIcon]:
    """Icon from a file path, or from the icon theme by name."""
    if not icon_spec:
        return None
    if os.path.exists(icon_spec):
        return QIcon(icon_spec)
    if QIcon.hasThemeIcon(icon_spec):
        return QIcon.fromTheme(icon_spec)
    log.debug("No icon found for %r", icon_spec)
    return None


class WaitWindow(QWidget):
    """Presentation layer for a WaitCoordinator."""

    def __init__(self, coordinator: WaitCoordinator, theme: Optional[Theme] = None) -> None:
        super().__init__()
        self.coordinator = coordinator
        self.theme = theme or Theme()
        self.setObjectName("WaitWindow")
        self.setWindowTitle("Waiting for File")
        self.resize(240, 120)

        self._build_ui()
        self.setStyleSheet(self.theme.get_stylesheet())

        self.coordinator.on_matched(self._on_matched)
        self.coordinator.on_cancelled(self._on_cancelled)

        self._tick_timer = QTimer(self)
        self._tick_timer.timeout.connect(self._tick)
        self._tick_timer.start(TICK_INTERVAL_MS)

    def _build_ui(self) -> None:
        cfg = self.coordinator.config

        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(12)

        icon = resolve_icon(cfg.icon)
        if icon is not None:
            self.icon_label = QLabel()
            self.icon_label.setPixmap(icon.pixmap(ICON_SIZE, ICON_SIZE))
            self.icon_label.setAlignment(Qt.AlignCenter)
            main_layout.addWidget(self.icon_label)

        vbox = QVBoxLayout()
        vbox.setSpacing(8)

        self.waiting_label = QLabel(f"Waiting for file: {cfg.presence_file}")
        self.waiting_label.setObjectName("WaitingLabel")
        vbox.addWidget(self.waiting_label)

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setTextVisible(False)
        vbox.addWidget(self.progress)

        buttons = QHBoxLayout()
        buttons.setSpacing(10)
        buttons.addStretch()

        self.btn_extra = QPushButton(cfg.extra_command.label)
        self.btn_extra.clicked.connect(self._on_extra_clicked)
        buttons.addWidget(self.btn_extra)

        self.btn_cancel = QPushButton("Cancel")
        self.btn_cancel.clicked.connect(self._on_cancel_clicked)
        buttons.addWidget(self.btn_cancel)

        buttons.addStretch()
        vbox.addLayout(buttons)
        main_layout.addLayout(vbox, 1)

    def _tick(self) -> None:
        # Visual only.
        self.progress.setValue((self.progress.value() + PULSE_STEP) % 101)

    def _on_cancel_clicked(self) -> None:
        self.coordinator.cancel()

    def _on_extra_clicked(self) -> None:
        self.coordinator.trigger_auxiliary()

    def _on_matched(self) -> None:
        log.info("Presence file detected; closing")
        self._quit()

    def _on_cancelled(self) -> None:
        self._quit()

    def _quit(self) -> None:
        self._tick_timer.stop()
        app = QApplication.instance()
        if app is not None:
            app.quit()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key_Escape:
            self.coordinator.cancel()
            event.accept()
            return
        super().keyPressEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:
        # Closing the window is another way to cancel; no-op once terminal.
        self.coordinator.cancel()
        super().closeEvent(event)
