"""
Gesture state machine.

High-level flow of step():
1) No hands -> drop any scale gesture, nothing else changes.
2) Two hands -> pinch-zoom (first frame only records the baseline distance).
3) One hand -> classify palm-open / pinch / victory on normalized landmarks.
4) Palm-open rising edge toggles the menu.
5) Menu open -> hit-test the index fingertip, feed the click debouncer.
6) Menu closed -> victory dissolves, pinch draws/erases, anything else ends
   the stroke.

SessionState and DocumentModel are passed in by the caller and mutated only
here; the caller guarantees one step() at a time (see pump.FramePump).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional

from .classifier import classify
from .document import GREEN, TRANSPARENT, DocumentModel, Mode, clamp_width
from .geometry import GestureFrame, canvas_ready, distance, midpoint, to_canvas, usable_hands
from .ui import ButtonKind, UiButton, hit_test, layout_buttons

logger = logging.getLogger(__name__)


class ClickDebouncer:
    """
    Cancel-and-restart deadline for menu clicks.

    - A hit on a new button cancels whatever was pending and arms a fresh
      deadline; the last button hit inside the window wins.
    - Hitting the already-pending button keeps its deadline running.
    - After a button fires it is ignored until the finger leaves every button
      (release()), so hovering never clicks twice. Coming back to it still
      counts as the latest hit and cancels any other pending click.
    """

    def __init__(self, window: float = 0.5):
        self.window = window
        self.pending: Optional[UiButton] = None
        self.deadline: Optional[float] = None
        self.last_fired: Optional[str] = None

    def submit(self, button: UiButton, now: float) -> bool:
        if button.id == self.last_fired:
            # back on the button that already fired: it is still the latest hit
            if self.pending is not None:
                self.cancel()
            return False
        if self.pending is not None and self.pending.id == button.id:
            return False
        self.pending = button
        self.deadline = now + self.window
        return True

    def release(self) -> None:
        self.last_fired = None

    def cancel(self) -> None:
        self.pending = None
        self.deadline = None

    def poll(self, now: float) -> Optional[UiButton]:
        if self.pending is None or now < self.deadline:
            return None
        button = self.pending
        self.cancel()
        self.last_fired = button.id
        return button


@dataclass
class SessionState:
    mode: Mode = Mode.DRAWING
    brush_color: tuple = GREEN
    brush_size: float = 10.0
    eraser_size: float = 60.0
    menu_open: bool = False
    is_drawing: bool = False
    was_palm_open: bool = False
    is_scaling: bool = False
    base_scale_dist: float = 0.0
    pending_click: ClickDebouncer = field(default_factory=ClickDebouncer)

    def __post_init__(self):
        self.brush_size = clamp_width(self.brush_size)
        self.eraser_size = clamp_width(self.eraser_size)

    def status(self) -> "SessionStatus":
        return SessionStatus(self.mode, self.menu_open, self.brush_color, self.brush_size)


@dataclass(frozen=True)
class SessionStatus:
    """Read-only view of the fields a status display needs."""
    mode: Mode
    menu_open: bool
    brush_color: tuple
    brush_size: float


class EventKind(Enum):
    MENU_OPENED = auto()
    MENU_CLOSED = auto()
    BUTTON_HOVER = auto()    #Hit submitted to the debouncer
    CLICK_APPLIED = auto()   #Debounced click took effect
    STROKE_STARTED = auto()
    STROKE_ENDED = auto()
    ERASED = auto()
    DISSOLVED = auto()
    SCALE_STARTED = auto()
    SCALED = auto()
    SCALE_ENDED = auto()


@dataclass
class UiEvent:
    kind: EventKind
    button: Optional[UiButton] = None
    value: float = 0.0


class GestureStateMachine:
    """
    Turns GestureFrames into document mutations and UI events.

    The machine itself holds only configuration and callbacks; all per-session
    memory lives in SessionState so a session can be inspected or reset by
    the caller.
    """
    # ──────────────────────────────────────────────────────────
    # Tuning Constants
    #
    # SCALE_GAIN: zoom factor per canvas unit of change in hand distance.
    # HIT_MARGIN: extra canvas units around each button that still count.
    # CLICK_DEBOUNCE: seconds a click must settle before it applies.
    # ──────────────────────────────────────────────────────────
    SCALE_GAIN = 0.002
    HIT_MARGIN = 20.0
    CLICK_DEBOUNCE = 0.5

    def __init__(self, rng=None):
        self.rng = rng
        self.callbacks: dict[EventKind, list[Callable]] = {k: [] for k in EventKind}

    def new_session(self) -> SessionState:
        return SessionState(pending_click=ClickDebouncer(self.CLICK_DEBOUNCE))

    def register_callback(self, kind: EventKind, callback: Callable):
        """Register a callback for an event kind."""
        self.callbacks[kind].append(callback)

    def _emit(self, events: list, event: UiEvent):
        events.append(event)
        for callback in self.callbacks[event.kind]:
            callback(event)

    # ──────────────────────────────────────────────────────────
    # Clicks
    # ──────────────────────────────────────────────────────────
    @staticmethod
    def apply_click(state: SessionState, button: UiButton):
        if button.kind == ButtonKind.COLOR:
            state.brush_color = button.value
            state.mode = Mode.DRAWING
        elif button.kind == ButtonKind.TOOL:
            state.mode = button.value
        elif button.kind == ButtonKind.SIZE:
            state.brush_size = clamp_width(button.value)
        logger.debug("Click applied: %s", button.id)

    def poll_click(self, state: SessionState, now: float) -> list:
        """Apply a debounced click whose window has elapsed."""
        events = []
        button = state.pending_click.poll(now)
        if button is not None:
            self.apply_click(state, button)
            self._emit(events, UiEvent(EventKind.CLICK_APPLIED, button=button))
        return events

    # ──────────────────────────────────────────────────────────
    # Frame step
    # ──────────────────────────────────────────────────────────
    def step(self, frame: GestureFrame, state: SessionState, doc: DocumentModel) -> list:
        events = self.poll_click(state, frame.timestamp)

        hands = usable_hands(frame.hands)
        if not hands:
            self._end_scaling(state, events)
            return events

        # Canvas not measured yet: mapped points would be degenerate.
        if not canvas_ready(frame.canvas_size):
            self._end_scaling(state, events)
            return events

        # ═══════════════════════════════════════════════════════════
        # TWO-HAND SCALE (never falls through to single-hand logic)
        # ═══════════════════════════════════════════════════════════
        if len(hands) == 2:
            self._scale(hands, frame.canvas_size, state, doc, events)
            return events

        self._end_scaling(state, events)

        # ═══════════════════════════════════════════════════════════
        # SINGLE HAND
        # ═══════════════════════════════════════════════════════════
        hand = hands[0]
        signals = classify(hand)

        #Menu toggle on the palm-open rising edge only
        if signals.palm_open and not state.was_palm_open:
            state.menu_open = not state.menu_open
            self._end_stroke(state, events)
            kind = EventKind.MENU_OPENED if state.menu_open else EventKind.MENU_CLOSED
            logger.debug("Menu %s", "opened" if state.menu_open else "closed")
            self._emit(events, UiEvent(kind))
        state.was_palm_open = signals.palm_open

        index_tip = to_canvas(hand.index_tip, frame.canvas_size)

        if state.menu_open:
            buttons = layout_buttons(*frame.canvas_size)
            button = hit_test(index_tip, buttons, self.HIT_MARGIN)
            if button is None:
                state.pending_click.release()
            elif state.pending_click.submit(button, frame.timestamp):
                self._emit(events, UiEvent(EventKind.BUTTON_HOVER, button=button))
            return events

        if signals.victory:
            produced = doc.dissolve_all(self.rng)
            # the active stroke went with everything else
            self._end_stroke(state, events)
            if produced:
                logger.debug("Dissolved into %d particles", len(produced))
                self._emit(events, UiEvent(EventKind.DISSOLVED, value=len(produced)))
            return events

        if signals.pinch:
            thumb_tip = to_canvas(hand.thumb_tip, frame.canvas_size)
            self._pinch(midpoint(index_tip, thumb_tip), state, doc, events)
        else:
            self._end_stroke(state, events)
        return events

    def _pinch(self, point, state: SessionState, doc: DocumentModel, events: list):
        erasing = state.mode == Mode.ERASER
        if not state.is_drawing:
            state.is_drawing = True
            doc.start_stroke(
                point,
                color=TRANSPARENT if erasing else state.brush_color,
                width=state.eraser_size if erasing else state.brush_size,
                is_eraser=erasing,
            )
            logger.debug("Stroke started at (%.1f, %.1f)", point.x, point.y)
            self._emit(events, UiEvent(EventKind.STROKE_STARTED))
            return

        doc.extend_active_stroke(point)
        if erasing:
            removed = doc.erase_near(point, state.eraser_size)
            if removed:
                self._emit(events, UiEvent(EventKind.ERASED, value=removed))

    def _end_stroke(self, state: SessionState, events: list):
        if state.is_drawing:
            state.is_drawing = False
            self._emit(events, UiEvent(EventKind.STROKE_ENDED))

    def _scale(self, hands: list, canvas_size, state: SessionState, doc: DocumentModel, events: list):
        p1 = to_canvas(hands[0].index_tip, canvas_size)
        p2 = to_canvas(hands[1].index_tip, canvas_size)
        d = distance(p1, p2)

        # First frame of the gesture only records the baseline.
        if not state.is_scaling:
            state.is_scaling = True
            state.base_scale_dist = d
            self._emit(events, UiEvent(EventKind.SCALE_STARTED, value=d))
            return

        factor = 1.0 + (d - state.base_scale_dist) * self.SCALE_GAIN
        doc.rescale_about(midpoint(p1, p2), factor)
        state.base_scale_dist = d
        self._emit(events, UiEvent(EventKind.SCALED, value=factor))

    def _end_scaling(self, state: SessionState, events: list):
        if state.is_scaling:
            state.is_scaling = False
            self._emit(events, UiEvent(EventKind.SCALE_ENDED))
