"""Ordered record of arrival captures for the current race."""

import itertools
import threading
from dataclasses import dataclass, field
from datetime import datetime
from rt.common.logger import log


# One capture. Only the bib can change after creation.
@dataclass
class RaceRecord:
    _id: str = field(repr=False)
    _timestamp: datetime = field(repr=False)
    _elapsed: float = field(repr=False)
    bib_number: str = ""

    @property
    def id(self):
        return self._id
    @property
    def timestamp(self):
        return self._timestamp
    @property
    def elapsed(self):
        return self._elapsed

    def __repr__(self):
        return f"RaceRecord(id={self._id!r}, elapsed={self._elapsed:.3f}, bib_number={self.bib_number!r})"


class RecordLedger:
    """Append-only ordered list of RaceRecords.

    Insertion order is arrival order and is the only order: nothing here ever
    sorts by elapsed or bib. Positions are never stored on a record, they are
    read off the current index, so deleting an earlier record renumbers
    everyone after it for free.

    The ledger doesn't know about the race clock. Callers are trusted to only
    ``append()`` while the clock is running.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records = []
        # Never rewound, not even by clear(), so an id can't come back after a reset.
        self._ids = itertools.count(1)

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(self.records)

    # Snapshot of the sequence in canonical order, safe to hand to exporters and views.
    @property
    def records(self):
        with self._lock:
            return tuple(self._records)

    def append(self, elapsed, timestamp, bib=""):
        with self._lock:
            record_id = f"rec-{next(self._ids)}"
            # Out-of-order elapsed values are kept where they landed. Arrival order wins.
            if self._records and elapsed < self._records[-1].elapsed:
                log.warning(f"Capture '{record_id}' at {elapsed:.3f}s is earlier than the previous capture "
                            f"at {self._records[-1].elapsed:.3f}s, keeping arrival order")
            record = RaceRecord(record_id, timestamp, float(elapsed), (bib or "").strip())
            self._records.append(record)
            log.debug(f"Captured {record!r} at position {len(self._records)}")
        return record_id

    def get(self, record_id):
        with self._lock:
            return self._find(record_id)

    def position_of(self, record_id):
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    return index + 1
        return None

    def update_bib(self, record_id, bib):
        with self._lock:
            record = self._find(record_id)
            if record is None:
                log.debug(f"Ignored bib update for unknown record '{record_id}'")
                return
            record.bib_number = (bib or "").strip()
            log.debug(f"Set bib of '{record_id}' to '{record.bib_number}'")

    def delete(self, record_id):
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.id != record_id]
            if len(self._records) == before:
                log.debug(f"Ignored delete for unknown record '{record_id}'")
            else:
                log.info(f"Deleted record '{record_id}', {len(self._records)} records remain")

    def clear(self):
        with self._lock:
            count = len(self._records)
            self._records = []
        log.info(f"Cleared {count} records")

    def _find(self, record_id):
        for record in self._records:
            if record.id == record_id:
                return record
        return None
