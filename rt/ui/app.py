import sys
from datetime import datetime
from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QApplication,
    QDialog,
    QFileDialog,
    QFrame,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)
from rt.common.logger import log
from rt.common.setup import PATHS
from rt.core import config
from rt.core.export import default_export_filename, export_text, write_export
from rt.core.formatting import format_elapsed, format_clock_time
from rt.core.session import RaceSession
from rt.core.timer_engine import Phase
from rt.ui.dialogs import SettingsDialog
from rt.ui.widgets import (
    IDLE_FG,
    RUNNING_FG,
    BuildContext,
    build_column_header,
    build_control_bar,
    build_header,
    build_record_row,
    build_results_toolbar,
)

_CAPTURE_KEYS = (Qt.Key_Space, Qt.Key_Return, Qt.Key_Enter)


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Main window of the race timer: stopwatch, controls and the live results list. Owns no timing logic itself, it
# only drives a RaceSession and redraws from it.
class MainWindow(QMainWindow):

    def __init__(self, session=None):
        super().__init__()
        self.setWindowTitle("Race Timer")
        self.setFocusPolicy(Qt.StrongFocus)

        # -- Settings --
        self.settings = config.load_settings()
        if self.settings["always_on_top"]:
            self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        # -- Core --
        self.session = session or RaceSession()
        self.session.engine.add_phase_listener(self._on_phase_changed)
        self.session.engine.add_reset_listener(self._on_reset_done)

        self._rows = {}  # record id -> widget dict

        # -- Build UI skeleton --
        central = QWidget()
        self.setCentralWidget(central)
        self._main_lay = QVBoxLayout(central)
        self._main_lay.setContentsMargins(16, 12, 16, 12)
        self._main_lay.setSpacing(10)
        self._build_ui()

        # -- Stopwatch refresh, only runs while the race clock runs --
        self._refresh_timer = QTimer(self)
        self._refresh_timer.setTimerType(Qt.PreciseTimer)
        self._refresh_timer.timeout.connect(self._refresh_stopwatch)

        # -- Wall clock (1 s) --
        self._clock_timer = QTimer(self)
        self._clock_timer.timeout.connect(self._tick_clock)
        self._clock_timer.start(1000)
        self._tick_clock()

        self._on_phase_changed(self.session.phase)
        self.resize(760, 640)

    # ------------------------------------------------------------------ #
    #  Layout                                                              #
    # ------------------------------------------------------------------ #

    def _build_ui(self):
        while self._main_lay.count():
            item = self._main_lay.takeAt(0)
            w = item.widget()
            if w:
                w.hide()
                w.deleteLater()

        self._ctx = BuildContext.compute(self.settings["font"])

        header, hw = build_header(self._ctx)
        self._stopwatch_lbl = hw["stopwatch"]
        self._clock_lbl = hw["clock"]
        self._main_lay.addWidget(header)

        controls, cw = build_control_bar(
            self._ctx,
            on_start=self._on_start,
            on_capture=self._on_capture,
            on_stop=self._on_stop,
            on_reset=self._on_reset,
            on_config=self._on_config,
        )
        self._controls = cw
        self._main_lay.addWidget(controls)

        toolbar, tw = build_results_toolbar(self._ctx, on_copy=self._on_copy, on_save=self._on_save)
        self._toolbar = tw
        self._main_lay.addWidget(toolbar)

        self._main_lay.addWidget(build_column_header(self._ctx))

        self._scroll = QScrollArea()
        self._scroll.setWidgetResizable(True)
        self._scroll.setFrameShape(QFrame.NoFrame)
        self._scroll.setFocusPolicy(Qt.NoFocus)
        rows_host = QWidget()
        self._rows_lay = QVBoxLayout(rows_host)
        self._rows_lay.setContentsMargins(0, 0, 0, 0)
        self._rows_lay.setSpacing(0)
        self._rows_lay.addStretch()
        self._scroll.setWidget(rows_host)
        self._main_lay.addWidget(self._scroll, 1)

        hint = QLabel("Press SPACE or a number key to record a time. Press ENTER to confirm a bib number.")
        hint.setAlignment(Qt.AlignCenter)
        hint.setStyleSheet("color: #808080;")
        self._main_lay.addWidget(hint)

        self._rebuild_rows()
        if hasattr(self, "_refresh_timer"):
            self._on_phase_changed(self.session.phase)

    # Tear down and recreate every result row. Positions come fresh from the ledger order each time.
    def _rebuild_rows(self):
        self._rows.clear()
        while self._rows_lay.count() > 1:
            item = self._rows_lay.takeAt(0)
            w = item.widget()
            if w:
                w.hide()
                w.deleteLater()
        for position, record in enumerate(self.session.records, start=1):
            self._add_row(position, record)
        self._update_count()

    def _add_row(self, position, record):
        rc, wd = build_record_row(
            self._ctx, position, record,
            on_bib_edited=self._on_bib_edited,
            on_delete=self._on_delete,
        )
        self._rows[record.id] = wd
        # Keep the trailing stretch last
        self._rows_lay.insertWidget(self._rows_lay.count() - 1, rc)
        return wd

    def _update_count(self):
        n = len(self.session.ledger)
        self._toolbar["count"].setText(f"{n} runner{'' if n == 1 else 's'}")
        self._toolbar["copy"].setEnabled(n > 0)
        self._toolbar["save"].setEnabled(n > 0)

    # ------------------------------------------------------------------ #
    #  Keyboard                                                            #
    # ------------------------------------------------------------------ #

    def keyPressEvent(self, event):
        # Typing into a bib field is not a capture
        if isinstance(QApplication.focusWidget(), QLineEdit):
            super().keyPressEvent(event)
            return

        text = event.text()
        if event.key() in _CAPTURE_KEYS:
            self._on_capture()
            event.accept()
        elif len(text) == 1 and text.isdigit() and text.isascii():
            self._on_capture(bib=text, focus_bib=True)
            event.accept()
        else:
            super().keyPressEvent(event)

    # ------------------------------------------------------------------ #
    #  Control handlers                                                    #
    # ------------------------------------------------------------------ #

    def _on_start(self):
        self.session.start()

    def _on_stop(self):
        self.session.pause()
        self._refresh_stopwatch()

    def _on_reset(self):
        if self.settings["confirm_reset"]:
            if QMessageBox.question(
                    self, "Confirm Reset",
                    "Reset the race clock and erase every captured time?"
            ) != QMessageBox.Yes:
                return
        self.session.reset()

    def _on_capture(self, bib="", focus_bib=False):
        record_id = self.session.capture(bib)
        if record_id is None:
            return
        record = self.session.ledger.get(record_id)
        wd = self._add_row(self.session.position_of(record_id), record)
        self._update_count()
        QTimer.singleShot(0, lambda: self._scroll.verticalScrollBar().setValue(
            self._scroll.verticalScrollBar().maximum()))
        # A digit key starts the bib, leave the field open so the rest of the number can be typed
        if focus_bib:
            wd["bib"].setFocus()
            wd["bib"].end(False)

    def _on_bib_edited(self, record_id, text):
        record = self.session.ledger.get(record_id)
        if record is not None and record.bib_number != text.strip():
            self.session.update_bib(record_id, text)

    def _on_delete(self, record_id):
        record = self.session.ledger.get(record_id)
        if record is None:
            return
        if self.settings["confirm_delete"]:
            position = self.session.position_of(record_id)
            if QMessageBox.question(
                    self, "Confirm Delete",
                    f"Delete time {format_elapsed(record.elapsed)} at position {position}?"
            ) != QMessageBox.Yes:
                return
        self.session.delete(record_id)
        self._rebuild_rows()

    # ------------------------------------------------------------------ #
    #  Export                                                              #
    # ------------------------------------------------------------------ #

    def _on_copy(self):
        records = self.session.records
        if not records:
            return
        QApplication.clipboard().setText(export_text(records, self.settings["clipboard_separator"]))
        log.info(f"Copied {len(records)} records to clipboard")
        QMessageBox.information(self, "Copied", "Results copied. Paste them straight into your spreadsheet.")

    def _on_save(self):
        records = self.session.records
        if not records:
            return
        suggested = str(PATHS.exports / default_export_filename())
        path, _ = QFileDialog.getSaveFileName(self, "Save Results", suggested, "CSV files (*.csv);;All files (*)")
        if not path:
            return
        try:
            write_export(path, records, self.settings["csv_separator"])
        except OSError as e:
            log.warning(f"Failed to export results to '{path}'", exc_info=True)
            QMessageBox.warning(self, "Save Error", f"Failed to save results:\n{e}")

    # ------------------------------------------------------------------ #
    #  Settings                                                            #
    # ------------------------------------------------------------------ #

    def _on_config(self):
        dlg = SettingsDialog(self, self.settings)
        if dlg.exec() != QDialog.Accepted:
            return
        old = self.settings
        self.settings = dlg.chosen
        try:
            config.save_settings(self.settings)
        except OSError as e:
            log.warning("Failed to save settings", exc_info=True)
            QMessageBox.warning(self, "Save Error", f"Failed to save settings:\n{e}")

        if self.settings["font"] != old["font"]:
            self._build_ui()
        if self.settings["refresh_interval_ms"] != old["refresh_interval_ms"] and self._refresh_timer.isActive():
            self._refresh_timer.start(self.settings["refresh_interval_ms"])
        if self.settings["always_on_top"] != old["always_on_top"]:
            self.setWindowFlag(Qt.WindowStaysOnTopHint, self.settings["always_on_top"])
            self.show()

    # ------------------------------------------------------------------ #
    #  Phase / refresh                                                     #
    # ------------------------------------------------------------------ #

    # Refresh loop runs only while the clock runs; leaving Running stops it outright.
    def _on_phase_changed(self, phase):
        running = phase is Phase.RUNNING
        if running:
            self._refresh_timer.start(self.settings["refresh_interval_ms"])
        else:
            self._refresh_timer.stop()

        self._controls["start"].setVisible(not running)
        self._controls["start"].setText("Resume" if phase is Phase.PAUSED else "Start")
        self._controls["capture"].setVisible(running)
        self._controls["stop"].setVisible(running)
        self._controls["reset"].setEnabled(phase is not Phase.IDLE or len(self.session.ledger) > 0)
        self._stopwatch_lbl.setStyleSheet(f"color: {RUNNING_FG if running else IDLE_FG};")
        self._refresh_stopwatch()

    def _on_reset_done(self):
        self._rebuild_rows()
        self._refresh_stopwatch()

    def _refresh_stopwatch(self):
        self._stopwatch_lbl.setText(format_elapsed(self.session.current_elapsed()))

    def _tick_clock(self):
        self._clock_lbl.setText(format_clock_time(datetime.now()))

    def closeEvent(self, event):
        if len(self.session.ledger) > 0:
            if QMessageBox.question(
                    self, "Quit",
                    "Captured times are not saved between runs. Quit anyway?"
            ) != QMessageBox.Yes:
                event.ignore()
                return
        self._refresh_timer.stop()
        self._clock_timer.stop()
        log.info(f"Closing with race clock {self.session.phase.value} and {len(self.session.ledger)} records")
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
