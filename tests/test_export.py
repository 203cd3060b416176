"""Tests for rt.core.formatting and rt.core.export."""

import shutil
import tempfile
import unittest
from datetime import date, datetime, timezone
from pathlib import Path


def _ledger_with(*captures):
    from rt.core.ledger import RecordLedger
    ledger = RecordLedger()
    for elapsed, bib, ts in captures:
        ledger.append(elapsed, ts, bib)
    return ledger


class TestFormatting(unittest.TestCase):

    def test_format_elapsed(self):
        from rt.core.formatting import format_elapsed
        self.assertEqual(format_elapsed(0), "00:00:00.00")
        self.assertEqual(format_elapsed(1.7), "00:00:01.70")
        self.assertEqual(format_elapsed(0.29), "00:00:00.29")
        self.assertEqual(format_elapsed(3723.456), "01:02:03.45")
        self.assertEqual(format_elapsed(100 * 3600), "100:00:00.00")

    def test_format_elapsed_truncates_and_clamps(self):
        from rt.core.formatting import format_elapsed
        self.assertEqual(format_elapsed(59.999), "00:00:59.99")
        self.assertEqual(format_elapsed(-3), "00:00:00.00")

    def test_format_elapsed_rounds_to_the_millisecond_before_truncating(self):
        from rt.core.formatting import format_elapsed
        self.assertEqual(format_elapsed(0.009), "00:00:00.00")
        self.assertEqual(format_elapsed(0.019), "00:00:00.01")
        self.assertEqual(format_elapsed(0.99999999), "00:00:01.00")
        self.assertEqual(format_elapsed(3.2 - 1.5), "00:00:01.70")

    def test_format_absolute_time(self):
        from rt.core.formatting import format_absolute_time, format_clock_time
        dt = datetime(2026, 5, 17, 9, 5, 7, 89000)
        self.assertEqual(format_absolute_time(dt), "09:05:07.089")
        self.assertEqual(format_clock_time(dt), "09:05:07")


class TestExport(unittest.TestCase):

    def setUp(self):
        self.ts1 = datetime(2026, 5, 17, 10, 0, 1, 500000, tzinfo=timezone.utc)
        self.ts2 = datetime(2026, 5, 17, 10, 0, 3, 0, tzinfo=timezone.utc)
        self.ledger = _ledger_with((1.0, "", self.ts1), (3.2, "7", self.ts2))

    def test_semicolon_export_has_header_and_one_line_per_record(self):
        from rt.core.export import export_text
        lines = export_text(self.ledger.records, ";").split("\n")
        self.assertEqual(len(lines), 3)
        for line in lines:
            self.assertEqual(len(line.split(";")), 4)
        self.assertEqual(lines[0], "Position;Bib;Race Time;Arrival Time")
        self.assertEqual(lines[1], "1;Unknown;00:00:01.00;10:00:01.500")
        self.assertEqual(lines[2], "2;7;00:00:03.20;10:00:03.000")

    def test_tab_export(self):
        from rt.core.export import CLIPBOARD_SEPARATOR, export_text
        text = export_text(self.ledger.records, CLIPBOARD_SEPARATOR)
        self.assertFalse(text.endswith("\n"))
        self.assertEqual(text.split("\n")[2].split("\t"), ["2", "7", "00:00:03.20", "10:00:03.000"])

    def test_positions_follow_current_order_after_delete(self):
        from rt.core.export import export_rows
        first = self.ledger.records[0].id
        self.ledger.delete(first)
        rows = export_rows(self.ledger.records)
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[1][:2], ("1", "7"))

    def test_empty_ledger_exports_header_only(self):
        from rt.core.export import HEADER, export_text
        self.assertEqual(export_text((), ";"), ";".join(HEADER))

    def test_separator_inside_bib_is_neutralised(self):
        from rt.core.export import export_text
        rid = self.ledger.records[1].id
        self.ledger.update_bib(rid, "7;B\nx")
        last = export_text(self.ledger.records, ";").split("\n")[-1]
        self.assertEqual(last.split(";")[1], "7 B x")

    def test_empty_separator_is_rejected(self):
        from rt.core.export import export_text
        with self.assertRaises(ValueError):
            export_text(self.ledger.records, "")

    def test_default_filename(self):
        from rt.core.export import default_export_filename
        self.assertEqual(default_export_filename(date(2026, 5, 17)), "race_results_2026-05-17.csv")

    def test_write_export(self):
        from rt.core.export import export_text, write_export
        tmpdir = tempfile.mkdtemp()
        try:
            path = write_export(Path(tmpdir) / "out.csv", self.ledger.records, ";")
            self.assertEqual(path.read_text(encoding="utf-8"), export_text(self.ledger.records, ";"))
        finally:
            shutil.rmtree(tmpdir, ignore_errors=True)

    def test_write_export_to_missing_directory_raises(self):
        from rt.core.export import write_export
        tmpdir = tempfile.mkdtemp()
        try:
            with self.assertRaises(OSError):
                write_export(Path(tmpdir) / "missing" / "out.csv", self.ledger.records)
        finally:
            shutil.rmtree(tmpdir, ignore_errors=True)


if __name__ == "__main__":
    unittest.main()
