"""
MediaPipe HandLandmarker adapter.

Runs the Tasks API in LIVE_STREAM mode; every finished inference arrives on
MediaPipe's callback thread, is turned into a validated GestureFrame and
passed to the listener (normally FramePump.submit).
"""

import logging
import time
from pathlib import Path
from typing import Callable

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from .geometry import frame_from_landmarks

logger = logging.getLogger(__name__)

script_dir = Path(__file__).parent


class HandDetector:
    """
    Feeds BGR camera frames to MediaPipe and forwards results as GestureFrames.

    canvas_size: zero-arg callable returning the current (w, h) of the drawing
    surface; read when each result arrives so resizes are picked up.
    """
    NUM_HANDS = 2
    MIN_DETECTION_CONFIDENCE = 0.5
    MIN_PRESENCE_CONFIDENCE = 0.5
    MIN_TRACKING_CONFIDENCE = 0.5

    def __init__(self, listener: Callable, canvas_size: Callable,
                 model_path: str | Path = script_dir / "hand_landmarker.task"):
        model_path = str(model_path)
        if not Path(model_path).exists():
            raise FileNotFoundError(f"Missing model file: {model_path}")

        self.listener = listener
        self.canvas_size = canvas_size
        self.start_time = None
        self.last_timestamp_ms = -1

        base_options = python.BaseOptions(model_asset_path=model_path)
        options = vision.HandLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.LIVE_STREAM,
            num_hands=self.NUM_HANDS,
            min_hand_detection_confidence=self.MIN_DETECTION_CONFIDENCE,
            min_hand_presence_confidence=self.MIN_PRESENCE_CONFIDENCE,
            min_tracking_confidence=self.MIN_TRACKING_CONFIDENCE,
            result_callback=self._on_result,
        )
        self.landmarker = vision.HandLandmarker.create_from_options(options)
        logger.info("HandLandmarker ready (%s)", model_path)

    def detect_async(self, frame: np.ndarray, timestamp: float = None):
        """Queue one BGR frame for detection; results arrive via the listener."""
        timestamp = time.monotonic() if timestamp is None else timestamp
        if self.start_time is None:
            self.start_time = timestamp

        # LIVE_STREAM mode requires strictly increasing millisecond timestamps.
        computed_ms = int((timestamp - self.start_time) * 1000)
        timestamp_ms = max(self.last_timestamp_ms + 1, computed_ms)
        self.last_timestamp_ms = timestamp_ms

        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        self.landmarker.detect_async(mp_image, timestamp_ms)

    def _on_result(self, result, output_image, timestamp_ms: int):
        hands = result.hand_landmarks if result is not None else []
        timestamp = (self.start_time or 0.0) + timestamp_ms / 1000.0
        frame = frame_from_landmarks(hands, self.canvas_size(), timestamp)
        self.listener(frame)

    def close(self):
        self.landmarker.close()
