"""Turns the ledger into spreadsheet-friendly text.

Rows are ``(position, bib, race time, arrival time)`` under a fixed header,
fields joined by a caller-chosen separator and rows joined by newlines.
"""

from datetime import date
from pathlib import Path
from rt.common.logger import log
from rt.core.formatting import format_elapsed, format_absolute_time

HEADER = ("Position", "Bib", "Race Time", "Arrival Time")
UNKNOWN_BIB = "Unknown"

# Tabs paste straight into spreadsheet cells, semicolons suit locales where the comma is the decimal mark.
CLIPBOARD_SEPARATOR = "\t"
CSV_SEPARATOR = ";"


def export_rows(records):
    rows = [HEADER]
    for index, record in enumerate(records):
        rows.append((
            str(index + 1),
            record.bib_number or UNKNOWN_BIB,
            format_elapsed(record.elapsed),
            format_absolute_time(record.timestamp),
        ))
    return rows


# A stray separator or line break inside a bib would shift every column after it.
def _clean_field(value, separator):
    return value.replace(separator, " ").replace("\r", " ").replace("\n", " ")


def export_text(records, separator):
    if not separator:
        raise ValueError("Export separator must not be empty")
    return "\n".join(
        separator.join(_clean_field(field, separator) for field in row)
        for row in export_rows(records)
    )


def default_export_filename(day: date | None = None):
    day = day or date.today()
    return f"race_results_{day.isoformat()}.csv"


def write_export(path, records, separator=CSV_SEPARATOR):
    path = Path(path)
    text = export_text(records, separator)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    log.info(f"Exported {len(records)} records to '{path}'")
    return path
