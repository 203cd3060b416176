"""Widget builders for the stopwatch header, control bar and result rows.

Each builder returns a (container, widget_dict) tuple. The container is a
QWidget that can be dropped into a layout; the widget_dict maps logical names
to sub-widgets for later updates.
"""

from dataclasses import dataclass

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont, QFontMetrics
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)
from rt.core.export import UNKNOWN_BIB
from rt.core.formatting import format_elapsed, format_absolute_time

# Colors for the few things that change with race state
RUNNING_FG = "#2e7d32"
IDLE_FG = "#202020"
MUTED_FG = "#808080"
ROW_ALT_BG = "#f3f5f8"


@dataclass
class BuildContext:
    """Pre-computed fonts and column widths shared by every row in one rebuild pass."""
    font_family: str
    stopwatch_font: QFont
    clock_font: QFont
    button_font: QFont
    row_font: QFont
    bold_row_font: QFont
    pos_w: int
    bib_w: int
    time_w: int
    arrival_w: int

    @staticmethod
    def compute(font_family):
        row_font = QFont(font_family, 13)
        bold_row = QFont(font_family, 13)
        bold_row.setBold(True)
        fm = QFontMetrics(bold_row)

        stopwatch_font = QFont(font_family, 54)
        stopwatch_font.setBold(True)

        return BuildContext(
            font_family=font_family,
            stopwatch_font=stopwatch_font,
            clock_font=QFont(font_family, 14),
            button_font=QFont(font_family, 13),
            row_font=row_font,
            bold_row_font=bold_row,
            pos_w=fm.horizontalAdvance("0000") + 8,
            bib_w=fm.horizontalAdvance("00000000") + 16,
            time_w=fm.horizontalAdvance("000:00:00.00") + 12,
            arrival_w=fm.horizontalAdvance("00:00:00.000") + 12,
        )


def build_header(ctx):
    """Stopwatch readout plus the live wall clock.

    Returns (container, widget_dict) with keys: stopwatch, clock.
    """
    header = QWidget()
    lay = QVBoxLayout(header)
    lay.setContentsMargins(0, 0, 0, 0)

    clock_lbl = QLabel("")
    clock_lbl.setFont(ctx.clock_font)
    clock_lbl.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
    clock_lbl.setStyleSheet(f"color: {MUTED_FG};")
    clock_lbl.setToolTip("Local time")
    lay.addWidget(clock_lbl)

    stopwatch_lbl = QLabel(format_elapsed(0))
    stopwatch_lbl.setFont(ctx.stopwatch_font)
    stopwatch_lbl.setAlignment(Qt.AlignCenter)
    stopwatch_lbl.setStyleSheet(f"color: {IDLE_FG};")
    lay.addWidget(stopwatch_lbl)

    return header, {"stopwatch": stopwatch_lbl, "clock": clock_lbl}


def build_control_bar(ctx, on_start, on_capture, on_stop, on_reset, on_config):
    """Start/Resume, Capture, Stop, Reset and settings buttons.

    Visibility of start vs capture/stop is left to the caller, which knows
    the phase. Returns (container, widget_dict).
    """
    start_btn = QPushButton("Start")
    start_btn.setFont(ctx.button_font)
    start_btn.clicked.connect(lambda _=False: on_start())
    start_btn.setToolTip("Start or resume the race clock")

    capture_btn = QPushButton("Capture  [Space]")
    capture_btn.setFont(ctx.button_font)
    capture_btn.clicked.connect(lambda _=False: on_capture())
    capture_btn.setToolTip("Record an arrival at the current race time")

    stop_btn = QPushButton("Stop")
    stop_btn.setFont(ctx.button_font)
    stop_btn.clicked.connect(lambda _=False: on_stop())

    reset_btn = QPushButton("Reset")
    reset_btn.setFont(ctx.button_font)
    reset_btn.clicked.connect(lambda _=False: on_reset())
    reset_btn.setToolTip("Zero the race clock and clear every result")

    cfg_btn = QPushButton("⚙")
    cfg_btn.setFont(ctx.button_font)
    cfg_btn.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
    cfg_btn.clicked.connect(lambda _=False: on_config())
    cfg_btn.setToolTip("Settings")

    # Buttons must not steal Space/Enter from the window-level capture keys
    for btn in (start_btn, capture_btn, stop_btn, reset_btn, cfg_btn):
        btn.setFocusPolicy(Qt.NoFocus)

    bar = QWidget()
    lay = QHBoxLayout(bar)
    lay.setContentsMargins(0, 0, 0, 0)
    lay.addStretch()
    lay.addWidget(start_btn)
    lay.addWidget(capture_btn)
    lay.addWidget(stop_btn)
    lay.addWidget(reset_btn)
    lay.addStretch()
    lay.addWidget(cfg_btn)

    return bar, {
        "start": start_btn, "capture": capture_btn,
        "stop": stop_btn, "reset": reset_btn, "cfg": cfg_btn,
    }


def build_results_toolbar(ctx, on_copy, on_save):
    """Runner count label plus the two export buttons."""
    count_lbl = QLabel("0 runners")
    count_lbl.setFont(ctx.bold_row_font)

    copy_btn = QPushButton("Copy (Sheets)")
    copy_btn.setFont(ctx.button_font)
    copy_btn.clicked.connect(lambda _=False: on_copy())
    copy_btn.setToolTip("Copy results as tab separated text for pasting into a spreadsheet")

    save_btn = QPushButton("CSV")
    save_btn.setFont(ctx.button_font)
    save_btn.clicked.connect(lambda _=False: on_save())
    save_btn.setToolTip("Save results to a CSV file")

    for btn in (copy_btn, save_btn):
        btn.setFocusPolicy(Qt.NoFocus)

    bar = QWidget()
    lay = QHBoxLayout(bar)
    lay.setContentsMargins(0, 0, 0, 0)
    lay.addWidget(count_lbl)
    lay.addStretch()
    lay.addWidget(copy_btn)
    lay.addWidget(save_btn)

    return bar, {"count": count_lbl, "copy": copy_btn, "save": save_btn}


def build_column_header(ctx):
    header = QWidget()
    lay = QHBoxLayout(header)
    lay.setContentsMargins(4, 0, 4, 0)
    for text, width in (("#", ctx.pos_w), ("Bib", ctx.bib_w),
                        ("Race Time", ctx.time_w), ("Arrival Time", ctx.arrival_w)):
        lbl = QLabel(text)
        lbl.setFont(ctx.bold_row_font)
        lbl.setFixedWidth(width)
        lbl.setStyleSheet(f"color: {MUTED_FG};")
        lay.addWidget(lbl)
    lay.addStretch()
    return header


def build_record_row(ctx, position, record, on_bib_edited, on_delete):
    """Build one result row. Position is passed in, never read off the record.

    Returns (container, widget_dict).
    """
    rc = QWidget()
    rc.setObjectName("recordRow")
    if position % 2 == 0:
        rc.setStyleSheet(f"#recordRow {{ background-color: {ROW_ALT_BG}; }}")
    lay = QHBoxLayout(rc)
    lay.setContentsMargins(4, 1, 4, 1)

    pos_lbl = QLabel(str(position))
    pos_lbl.setFont(ctx.bold_row_font)
    pos_lbl.setFixedWidth(ctx.pos_w)
    lay.addWidget(pos_lbl)

    bib_input = QLineEdit(record.bib_number)
    bib_input.setFont(ctx.row_font)
    bib_input.setFixedWidth(ctx.bib_w)
    bib_input.setPlaceholderText(UNKNOWN_BIB)
    rid = record.id
    # Every keystroke lands in the ledger, so an export never lags behind what's on screen
    bib_input.textEdited.connect(lambda text: on_bib_edited(rid, text))
    bib_input.editingFinished.connect(lambda: on_bib_edited(rid, bib_input.text()))
    # Enter hands focus back to the window so Space captures again
    bib_input.returnPressed.connect(bib_input.clearFocus)
    lay.addWidget(bib_input)

    time_lbl = QLabel(format_elapsed(record.elapsed))
    time_lbl.setFont(ctx.bold_row_font)
    time_lbl.setFixedWidth(ctx.time_w)
    lay.addWidget(time_lbl)

    arrival_lbl = QLabel(format_absolute_time(record.timestamp))
    arrival_lbl.setFont(ctx.row_font)
    arrival_lbl.setFixedWidth(ctx.arrival_w)
    arrival_lbl.setStyleSheet(f"color: {MUTED_FG};")
    lay.addWidget(arrival_lbl)

    lay.addStretch()

    x_btn = QPushButton("X")
    x_btn.setFont(ctx.row_font)
    x_btn.setFocusPolicy(Qt.NoFocus)
    x_btn.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
    x_btn.clicked.connect(lambda _=False: on_delete(rid))
    x_btn.setToolTip("Delete this time")
    lay.addWidget(x_btn)

    return rc, {
        "position": pos_lbl, "bib": bib_input, "time": time_lbl,
        "arrival": arrival_lbl, "x": x_btn, "container": rc,
    }
