"""Race clock state machine. Pure logic, no UI.

Elapsed time is always recomputed from an absolute monotonic read against an
anchor, never built up by adding ticks, so polling it every frame can't drift.
"""

import threading
import time
from enum import Enum
from rt.common.logger import log


class Phase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class TimerEngine:
    """Owns the Idle/Running/Paused phase and the authoritative elapsed value.

    Redundant control signals (``start()`` while running, ``pause()`` while
    not running) are ignored rather than raised, since they come straight from
    an operator's keyboard.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self.phase = Phase.IDLE
        self._anchor = None
        self._accumulated = 0.0

        self._phase_listeners = []
        self._reset_listeners = []

    # Listeners get called outside the lock, after the transition has fully landed.
    def add_phase_listener(self, callback):
        self._phase_listeners.append(callback)
    def add_reset_listener(self, callback):
        self._reset_listeners.append(callback)

    @property
    def running(self):
        return self.phase is Phase.RUNNING

    def current_elapsed(self):
        with self._lock:
            if self.phase is Phase.RUNNING:
                return self._clock() - self._anchor
            return self._accumulated

    # Phase check and clock read under one lock; None unless the clock is running.
    def elapsed_if_running(self):
        with self._lock:
            if self.phase is Phase.RUNNING:
                return self._clock() - self._anchor
            return None

    # Idle -> Running starts from zero. Paused -> Running rebuilds the anchor so that now - anchor is exactly the
    # frozen value, which keeps elapsed continuous and leaves the paused interval out.
    def start(self):
        with self._lock:
            if self.phase is Phase.RUNNING:
                log.debug("Ignored start(), race clock is already running")
                return
            now = self._clock()
            if self.phase is Phase.IDLE:
                self._accumulated = 0.0
                self._anchor = now
                log.info("Race clock started")
            else:
                self._anchor = now - self._accumulated
                log.info(f"Race clock resumed at {self._accumulated:.3f}s")
            self.phase = Phase.RUNNING
        self._notify_phase()

    def pause(self):
        with self._lock:
            if self.phase is not Phase.RUNNING:
                log.debug(f"Ignored pause(), race clock is {self.phase.value}")
                return
            self._accumulated = self._clock() - self._anchor
            self._anchor = None
            self.phase = Phase.PAUSED
            log.info(f"Race clock paused at {self._accumulated:.3f}s")
        self._notify_phase()

    # Irreversible. Whether to ask the operator first is up to the caller.
    def reset(self):
        with self._lock:
            previous = self.phase
            self.phase = Phase.IDLE
            self._anchor = None
            self._accumulated = 0.0
            log.info(f"Race clock reset from {previous.value}")
        for callback in self._reset_listeners:
            callback()
        if previous is not Phase.IDLE:
            self._notify_phase()

    def _notify_phase(self):
        phase = self.phase
        for callback in self._phase_listeners:
            callback(phase)
