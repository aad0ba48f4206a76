"""
OpenCV overlay renderer.

Reads a document snapshot and status fields and draws them onto a BGR frame.
Nothing here feeds back into gesture logic.
"""

import cv2
import numpy as np

from .document import Mode
from .ui import ButtonKind, layout_buttons

#Connection pairs for skeleton
HAND_CONNECTIONS = [
    (0,1),(1,2),(2,3),(3,4),        # Thumb
    (0,5),(5,6),(6,7),(7,8),        # Index
    (0,9),(9,10),(10,11),(11,12),   # Middle
    (0,13),(13,14),(14,15),(15,16), # Ring
    (0,17),(17,18),(18,19),(19,20), # Pinky
    (5,9),(9,13),(13,17)            # Palm
]


def to_bgr(rgba):
    r, g, b = rgba[:3]
    return (int(b), int(g), int(r))


def draw_strokes(frame, strokes):
    """Polyline per stroke; eraser strokes are bookkeeping only and not drawn."""
    for stroke in strokes:
        if stroke.is_eraser or not stroke.points:
            continue
        pts = np.array([[p.x, p.y] for p in stroke.points], dtype=np.int32)
        thickness = max(1, int(round(stroke.width)))
        if len(pts) == 1:
            cv2.circle(frame, tuple(int(v) for v in pts[0]), max(1, thickness // 2),
                       to_bgr(stroke.color), -1, cv2.LINE_AA)
        else:
            cv2.polylines(frame, [pts.reshape(-1, 1, 2)], False, to_bgr(stroke.color),
                          thickness, cv2.LINE_AA)
    return frame


def draw_particles(frame, particles):
    if not particles:
        return frame
    for p in particles:
        alpha = min(max(p.alpha, 0.0), 1.0)
        center = (int(p.x), int(p.y))
        radius = max(1, int(p.radius))
        x0, y0 = max(center[0] - radius, 0), max(center[1] - radius, 0)
        x1 = min(center[0] + radius + 1, frame.shape[1])
        y1 = min(center[1] + radius + 1, frame.shape[0])
        if x0 >= x1 or y0 >= y1:
            continue
        # Each particle blends from its own ROI copy
        roi = frame[y0:y1, x0:x1]
        layer = roi.copy()
        cv2.circle(layer, (center[0] - x0, center[1] - y0), radius,
                   to_bgr(p.color), -1, cv2.LINE_AA)
        frame[y0:y1, x0:x1] = cv2.addWeighted(layer, alpha, roi, 1 - alpha, 0)
    return frame


def draw_menu(frame, mode: Mode, brush_size: float = None):
    h, w = frame.shape[:2]
    panel = frame.copy()
    cv2.rectangle(panel, (50, 50), (w - 50, int(h * 0.4)), (34, 34, 34), -1)
    frame[:] = cv2.addWeighted(panel, 0.8, frame, 0.2, 0)

    for btn in layout_buttons(w, h):
        center = (int(btn.center.x), int(btn.center.y))
        radius = int(btn.radius)
        if btn.kind == ButtonKind.COLOR:
            fill = to_bgr(btn.value)
        else:
            active = ((btn.kind == ButtonKind.TOOL and mode == btn.value) or
                      (btn.kind == ButtonKind.SIZE and brush_size == btn.value))
            fill = (128, 128, 128) if active else (64, 64, 64)
        cv2.circle(frame, center, radius, fill, -1, cv2.LINE_AA)
        cv2.circle(frame, center, radius, (255, 255, 255), 2, cv2.LINE_AA)
        if btn.kind != ButtonKind.COLOR:
            cv2.putText(frame, btn.label, (center[0] - radius // 2, center[1] + 5),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
    return frame


def draw_status(frame, mode: Mode, menu_open: bool):
    text = f"Mode: {mode.value} | Menu: {'open' if menu_open else 'closed'}"
    h = frame.shape[0]
    cv2.rectangle(frame, (10, h - 40), (20 + 11 * len(text), h - 10), (0, 0, 0), -1)
    cv2.putText(frame, text, (16, h - 18), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2)
    return frame


def draw_landmarks(frame, hands):
    """Simplified hand skeleton from validated HandLandmarks."""
    h, w = frame.shape[:2]
    for hand in hands:
        lm = hand.landmarks
        for start_idx, end_idx in HAND_CONNECTIONS:
            x1, y1 = int(lm[start_idx][0] * w), int(lm[start_idx][1] * h)
            x2, y2 = int(lm[end_idx][0] * w), int(lm[end_idx][1] * h)
            cv2.line(frame, (x1, y1), (x2, y2), (0, 255, 0), 2)
        for row in lm:
            cv2.circle(frame, (int(row[0] * w), int(row[1] * h)), 4, (0, 255, 255), -1)
    return frame


def draw_scene(frame, doc, status, hands=()):
    """Full overlay from a document snapshot and a SessionStatus."""
    draw_strokes(frame, doc.strokes)
    draw_particles(frame, doc.particles)
    if status.menu_open:
        draw_menu(frame, status.mode, status.brush_size)
    draw_landmarks(frame, hands)
    draw_status(frame, status.mode, status.menu_open)
    return frame
