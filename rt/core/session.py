import threading
from datetime import datetime
from rt.common.logger import log
from rt.core.ledger import RecordLedger
from rt.core.timer_engine import TimerEngine


def _local_now():
    return datetime.now().astimezone()


# Glue between the race clock and the ledger. The clock never looks at the ledger, the ledger never touches the
# clock; this is the only place that reads one and writes the other.
class RaceSession:

    def __init__(self, engine=None, ledger=None, wall_clock=_local_now):
        self.engine = engine if engine is not None else TimerEngine()
        self.ledger = ledger if ledger is not None else RecordLedger()
        self._wall_clock = wall_clock
        # Held across a whole capture and across the ledger clear on reset, so a reset can never land between
        # reading the clock and appending the record. Reentrant because reset listeners run inside it.
        self._lock = threading.RLock()
        self.engine.add_reset_listener(self._clear_ledger)

    @property
    def phase(self):
        return self.engine.phase

    @property
    def records(self):
        return self.ledger.records

    def current_elapsed(self):
        return self.engine.current_elapsed()

    def start(self):
        self.engine.start()
    def pause(self):
        self.engine.pause()
    def reset(self):
        with self._lock:
            self.engine.reset()

    def _clear_ledger(self):
        with self._lock:
            self.ledger.clear()

    # One capture per call, each with its own clock reads, so two presses in the same frame give two records.
    # Returns the new record id, or None when the clock isn't running.
    def capture(self, bib=""):
        with self._lock:
            timestamp = self._wall_clock()
            elapsed = self.engine.elapsed_if_running()
            if elapsed is None:
                log.debug("Ignored capture, race clock is not running")
                return None
            return self.ledger.append(elapsed, timestamp, bib)

    def update_bib(self, record_id, bib):
        self.ledger.update_bib(record_id, bib)

    def delete(self, record_id):
        self.ledger.delete(record_id)

    def position_of(self, record_id):
        return self.ledger.position_of(record_id)
