"""Settings dialog for the race timer."""

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QFontComboBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

# Display name -> separator character, for both export targets
_SEPARATORS = {
    "Semicolon ( ; )": ";",
    "Comma ( , )": ",",
    "Tab": "\t",
}


def _separator_name(sep):
    for name, value in _SEPARATORS.items():
        if value == sep:
            return name
    return next(iter(_SEPARATORS))


# Small single-page settings dialog. Opens from the gear button in the main window; results are read back off the
# chosen_* attributes after exec() returns Accepted.
class SettingsDialog(QDialog):

    def __init__(self, parent, cfg):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setModal(True)

        self.chosen = dict(cfg)
        label_font = QFont("Calibri", 12, QFont.Bold)

        outer = QVBoxLayout(self)
        outer.setSpacing(12)

        def add_row(text, widget, tooltip=""):
            row = QHBoxLayout()
            lbl = QLabel(text)
            lbl.setFont(label_font)
            if tooltip:
                lbl.setToolTip(tooltip)
                widget.setToolTip(tooltip)
            row.addWidget(lbl)
            row.addStretch()
            row.addWidget(widget)
            outer.addLayout(row)

        self._confirm_reset = QComboBox()
        self._confirm_reset.addItems(["Yes", "No"])
        self._confirm_reset.setCurrentText("Yes" if cfg.get("confirm_reset", True) else "No")
        add_row("Confirm Reset:", self._confirm_reset,
                "Ask before zeroing the race clock and clearing all results.")

        self._confirm_delete = QComboBox()
        self._confirm_delete.addItems(["Yes", "No"])
        self._confirm_delete.setCurrentText("Yes" if cfg.get("confirm_delete", True) else "No")
        add_row("Confirm Delete:", self._confirm_delete, "Ask before deleting a single captured time.")

        self._always_on_top = QComboBox()
        self._always_on_top.addItems(["Always On Top", "Normal Window"])
        self._always_on_top.setCurrentText(
            "Always On Top" if cfg.get("always_on_top", False) else "Normal Window")
        add_row("Window Behavior:", self._always_on_top)

        self._refresh = QSpinBox()
        self._refresh.setRange(10, 1000)
        self._refresh.setSuffix(" ms")
        self._refresh.setValue(cfg.get("refresh_interval_ms", 31))
        add_row("Display Refresh:", self._refresh,
                "How often the stopwatch redraws while running. Captured times are unaffected.")

        self._csv_sep = QComboBox()
        self._csv_sep.addItems(list(_SEPARATORS))
        self._csv_sep.setCurrentText(_separator_name(cfg.get("csv_separator", ";")))
        add_row("CSV Separator:", self._csv_sep)

        self._clip_sep = QComboBox()
        self._clip_sep.addItems(list(_SEPARATORS))
        self._clip_sep.setCurrentText(_separator_name(cfg.get("clipboard_separator", "\t")))
        add_row("Copy Separator:", self._clip_sep, "Tab pastes straight into spreadsheet cells.")

        self._font = QFontComboBox()
        self._font.setCurrentFont(QFont(cfg.get("font", "Consolas")))
        add_row("Font:", self._font)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        apply_btn = QPushButton("Apply")
        apply_btn.setDefault(True)
        apply_btn.clicked.connect(self._apply)
        btn_row.addWidget(cancel_btn)
        btn_row.addWidget(apply_btn)
        outer.addLayout(btn_row)

        self.setWindowFlags(self.windowFlags() & ~Qt.WindowContextHelpButtonHint)

    def _apply(self):
        self.chosen["confirm_reset"] = self._confirm_reset.currentText() == "Yes"
        self.chosen["confirm_delete"] = self._confirm_delete.currentText() == "Yes"
        self.chosen["always_on_top"] = self._always_on_top.currentText() == "Always On Top"
        self.chosen["refresh_interval_ms"] = self._refresh.value()
        self.chosen["csv_separator"] = _SEPARATORS[self._csv_sep.currentText()]
        self.chosen["clipboard_separator"] = _SEPARATORS[self._clip_sep.currentText()]
        self.chosen["font"] = self._font.currentFont().family()
        self.accept()
