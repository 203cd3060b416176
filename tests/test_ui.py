"""Main window tests, run against Qt's offscreen platform."""

import os
import shutil
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class FakeClock:

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestMainWindowBibs(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        from PySide6.QtWidgets import QApplication
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        from rt.core import config
        self._orig_settings_path = config.SETTINGS_PATH
        config.SETTINGS_PATH = Path(self.tmpdir) / "settings.json"

        from rt.core.session import RaceSession
        from rt.core.timer_engine import TimerEngine
        from rt.ui.app import MainWindow
        self.clock = FakeClock(0.0)
        wall = datetime(2026, 5, 17, 10, 0, 0, tzinfo=timezone.utc)
        self.session = RaceSession(engine=TimerEngine(clock=self.clock), wall_clock=lambda: wall)
        self.window = MainWindow(session=self.session)
        self.window.show()

    def tearDown(self):
        from rt.core import config
        self.window._refresh_timer.stop()
        self.window._clock_timer.stop()
        self.window.deleteLater()
        config.SETTINGS_PATH = self._orig_settings_path
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_typed_bib_reaches_export_without_leaving_the_field(self):
        from PySide6.QtTest import QTest
        from rt.core.export import export_text
        self.session.start()
        self.clock.now = 0.01
        self.window._on_capture(bib="1", focus_bib=True)

        record_id = self.session.records[0].id
        bib_input = self.window._rows[record_id]["bib"]
        QTest.keyClicks(bib_input, "23")

        self.assertEqual(bib_input.text(), "123")
        self.assertEqual(self.session.ledger.get(record_id).bib_number, "123")
        last = export_text(self.session.records, "\t").split("\n")[-1]
        self.assertEqual(last.split("\t")[:2], ["1", "123"])

    def test_capture_key_while_idle_adds_no_row(self):
        self.window._on_capture()
        self.assertEqual(self.window._rows, {})
        self.assertEqual(self.session.records, ())


if __name__ == "__main__":
    unittest.main()
