"""End to end timing scenarios through rt.core.session.RaceSession."""

import unittest
from datetime import datetime, timezone


class FakeClock:

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestRaceSession(unittest.TestCase):

    def setUp(self):
        from rt.core.session import RaceSession
        from rt.core.timer_engine import TimerEngine
        self.clock = FakeClock(0.0)
        self.wall = datetime(2026, 5, 17, 10, 0, 0, tzinfo=timezone.utc)
        self.session = RaceSession(engine=TimerEngine(clock=self.clock), wall_clock=lambda: self.wall)

    def at(self, millis):
        self.clock.now = millis / 1000.0

    def test_capture_across_pause_and_resume(self):
        self.at(0)
        self.session.start()
        self.at(1000)
        first = self.session.capture()
        self.at(1500)
        self.session.pause()
        self.at(3000)
        self.session.start()
        self.at(3200)
        second = self.session.capture()

        records = self.session.records
        self.assertEqual([r.id for r in records], [first, second])
        self.assertAlmostEqual(records[0].elapsed, 1.0)
        self.assertAlmostEqual(records[1].elapsed, 1.7)

    def test_delete_first_capture_promotes_second(self):
        self.at(0)
        self.session.start()
        self.at(500)
        a = self.session.capture("")
        self.at(900)
        b = self.session.capture("7")
        self.session.delete(a)

        records = self.session.records
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].id, b)
        self.assertEqual(records[0].bib_number, "7")
        self.assertEqual(self.session.position_of(b), 1)

    def test_capture_while_idle_or_paused_does_nothing(self):
        self.assertIsNone(self.session.capture("5"))
        self.session.start()
        self.at(100)
        self.session.pause()
        self.assertIsNone(self.session.capture())
        self.assertEqual(self.session.records, ())

    def test_rapid_captures_are_never_coalesced(self):
        self.session.start()
        self.at(2000)
        ids = [self.session.capture() for _ in range(3)]
        self.assertEqual(len(set(ids)), 3)
        self.assertEqual(len(self.session.records), 3)
        for r in self.session.records:
            self.assertAlmostEqual(r.elapsed, 2.0)

    def test_capture_stamps_wall_clock(self):
        self.session.start()
        self.at(250)
        rid = self.session.capture()
        self.assertEqual(self.session.ledger.get(rid).timestamp, self.wall)

    def test_reset_clears_clock_and_records_from_every_phase(self):
        from rt.core.timer_engine import Phase
        for phase in (Phase.RUNNING, Phase.PAUSED, Phase.IDLE):
            with self.subTest(phase=phase):
                self.at(0)
                self.session.start()
                self.at(400)
                self.session.capture("12")
                self.session.capture()
                self.at(800)
                if phase is Phase.PAUSED:
                    self.session.pause()
                elif phase is Phase.IDLE:
                    self.session.reset()
                    self.assertIsNone(self.session.capture("3"))
                self.assertIs(self.session.phase, phase)

                self.session.reset()

                self.assertIs(self.session.phase, Phase.IDLE)
                self.assertEqual(self.session.current_elapsed(), 0.0)
                self.assertEqual(self.session.records, ())

    def test_reset_during_capture_leaves_no_record(self):
        """A reset landing while a capture is reading the clocks wins outright."""
        from rt.core.session import RaceSession
        from rt.core.timer_engine import Phase, TimerEngine

        def wall_clock_that_resets():
            session.reset()
            return self.wall

        session = RaceSession(engine=TimerEngine(clock=self.clock), wall_clock=wall_clock_that_resets)
        session.start()
        self.at(500)
        self.assertIsNone(session.capture("9"))
        self.assertIs(session.phase, Phase.IDLE)
        self.assertEqual(session.current_elapsed(), 0.0)
        self.assertEqual(session.records, ())

    def test_engine_reset_during_capture_leaves_no_record(self):
        from rt.core.session import RaceSession
        from rt.core.timer_engine import TimerEngine
        engine = TimerEngine(clock=self.clock)

        def wall_clock_that_resets():
            engine.reset()
            return self.wall

        session = RaceSession(engine=engine, wall_clock=wall_clock_that_resets)
        session.start()
        self.at(500)
        self.assertIsNone(session.capture())
        self.assertEqual(session.records, ())

    def test_reset_from_another_thread_never_strands_a_record(self):
        import threading
        import time
        from rt.core.session import RaceSession
        from rt.core.timer_engine import Phase
        session = RaceSession()
        session.start()
        stop = threading.Event()

        def hammer():
            while not stop.is_set():
                session.capture()

        worker = threading.Thread(target=hammer)
        worker.start()
        try:
            deadline = time.monotonic() + 5
            while len(session.ledger) < 50 and time.monotonic() < deadline:
                time.sleep(0.001)
            session.reset()
        finally:
            stop.set()
            worker.join(timeout=5)

        self.assertIs(session.phase, Phase.IDLE)
        self.assertEqual(session.records, ())

    def test_update_bib_after_capture(self):
        self.session.start()
        self.at(1200)
        rid = self.session.capture("1")
        self.session.update_bib(rid, "123")
        record = self.session.ledger.get(rid)
        self.assertEqual(record.bib_number, "123")
        self.assertAlmostEqual(record.elapsed, 1.2)

    def test_default_session_uses_real_clocks(self):
        from rt.core.session import RaceSession
        from rt.core.timer_engine import Phase
        session = RaceSession()
        self.assertIs(session.phase, Phase.IDLE)
        session.start()
        rid = session.capture()
        record = session.ledger.get(rid)
        self.assertIsNotNone(record.timestamp.tzinfo)
        self.assertGreaterEqual(record.elapsed, 0.0)


if __name__ == "__main__":
    unittest.main()
