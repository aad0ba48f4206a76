"""Hand-gesture drawing core: landmarks in, strokes and particles out."""

from .classifier import GestureSignals, classify
from .document import DocumentModel, Mode, Particle, Stroke
from .geometry import GestureFrame, HandLandmarks, Point, frame_from_landmarks
from .particles import ParticleSimulator
from .pump import FramePump
from .session import EventKind, GestureStateMachine, SessionState, UiEvent
from .ui import ButtonKind, UiButton, layout_buttons

__version__ = "0.1.0"
