"""
Single-consumer handoff between the detector, the particle clock and the
renderer.

- The detector callback thread calls submit(); only the newest unprocessed
  frame is kept (stale frames are dropped, not queued).
- One consumer applies frames in arrival order.
- The ticker advances particles and settles debounced clicks.
- Every mutation of SessionState/DocumentModel happens under one lock, so a
  frame step and a particle tick never overlap.
"""

import logging
import threading
import time

from .document import DocumentModel
from .geometry import GestureFrame
from .particles import ParticleSimulator
from .session import GestureStateMachine, SessionState

logger = logging.getLogger(__name__)


class FramePump:
    TICK_HZ = 60.0

    def __init__(self, machine: GestureStateMachine = None, state: SessionState = None,
                 doc: DocumentModel = None, simulator: ParticleSimulator = None,
                 clock=time.monotonic):
        self.machine = machine or GestureStateMachine()
        self.state = state or self.machine.new_session()
        self.doc = doc or DocumentModel()
        self.simulator = simulator or ParticleSimulator()
        self.clock = clock

        self._model_lock = threading.Lock()
        self._inbox = threading.Condition()
        self._latest = None
        self._last_tick = None
        self.last_frame = None
        self._running = False
        self._threads = []

        self.frames_processed = 0
        self.frames_dropped = 0

    def submit(self, frame: GestureFrame):
        """Hand a frame over from any thread; replaces an unprocessed one."""
        with self._inbox:
            if self._latest is not None:
                self.frames_dropped += 1
            self._latest = frame
            self._inbox.notify()

    def _take(self, timeout=None):
        with self._inbox:
            if self._latest is None and timeout is not None:
                self._inbox.wait(timeout)
            frame, self._latest = self._latest, None
            return frame

    def process_pending(self) -> list:
        """Apply the latest submitted frame, if any. Returns its UI events."""
        frame = self._take()
        if frame is None:
            return []
        return self._apply(frame)

    def _apply(self, frame: GestureFrame) -> list:
        with self._model_lock:
            events = self.machine.step(frame, self.state, self.doc)
            self.last_frame = frame
        self.frames_processed += 1
        return events

    def tick(self, now: float = None) -> list:
        """Advance particles by the elapsed time since the previous tick."""
        now = self.clock() if now is None else now
        with self._model_lock:
            if self._last_tick is not None:
                self.simulator.advance(self.doc.particles, now - self._last_tick)
            self._last_tick = now
            return self.machine.poll_click(self.state, now)

    def snapshot(self):
        """(document copy, SessionStatus, hands of the last applied frame)."""
        with self._model_lock:
            hands = list(self.last_frame.hands) if self.last_frame is not None else []
            return self.doc.snapshot(), self.state.status(), hands

    # ──────────────────────────────────────────────────────────
    # Threads
    # ──────────────────────────────────────────────────────────
    def start(self):
        if self._running:
            return
        self._running = True
        self._threads = [
            threading.Thread(target=self._consume_loop, name="gesture-consumer", daemon=True),
            threading.Thread(target=self._tick_loop, name="particle-ticker", daemon=True),
        ]
        for t in self._threads:
            t.start()
        logger.info("Frame pump started")

    def stop(self, timeout: float = 1.0):
        if not self._running:
            return
        self._running = False
        with self._inbox:
            self._inbox.notify_all()
        for t in self._threads:
            t.join(timeout)
        self._threads = []
        logger.info("Frame pump stopped (%d processed, %d dropped)",
                    self.frames_processed, self.frames_dropped)

    def _consume_loop(self):
        while self._running:
            frame = self._take(timeout=0.1)
            if frame is not None:
                self._apply(frame)

    def _tick_loop(self):
        period = 1.0 / self.TICK_HZ
        while self._running:
            self.tick()
            time.sleep(period)
