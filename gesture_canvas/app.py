"""
Demo runner: webcam -> HandLandmarker -> FramePump -> OpenCV window.

Gestures:
  - OPEN PALM: toggle the menu (index fingertip hovers a button to pick it)
  - PINCH: draw (or erase in eraser mode)
  - VICTORY: dissolve the drawing into particles
  - TWO HANDS: pinch-zoom existing strokes
Press 'q' to exit.
"""

import argparse
import logging
import sys

import cv2

from .detector import HandDetector, script_dir
from .pump import FramePump
from .render import draw_scene


def setup_camera(index: int = 0):
    """
    Open a webcam and return a cv2.VideoCapture.

    Returns:
        cv2.VideoCapture or None if the camera cannot be opened.
    """
    cap = cv2.VideoCapture(index)
    if not cap.isOpened():
        print("Cannot open camera")
        return None
    return cap


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Draw in the air with hand gestures.")
    parser.add_argument("--model", default=str(script_dir / "hand_landmarker.task"),
                        help="path to the MediaPipe hand_landmarker.task asset")
    parser.add_argument("--camera", type=int, default=0, help="camera index")
    parser.add_argument("--debug", action="store_true", help="log state transitions")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    print("Starting...")
    cap = setup_camera(args.camera)
    if cap is None:
        print("Camera failed to open")
        return 1

    # The canvas is the mirrored camera frame; its size is known after a read.
    canvas = {"size": (0.0, 0.0)}
    pump = FramePump()
    try:
        detector = HandDetector(pump.submit, lambda: canvas["size"], model_path=args.model)
    except FileNotFoundError as e:
        print(e)
        cap.release()
        return 1

    pump.start()
    print("Gesture canvas ready, press 'q' to quit")

    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                break

            # Front camera: mirror so the drawing follows the hand
            frame = cv2.flip(frame, 1)
            h, w = frame.shape[:2]
            canvas["size"] = (float(w), float(h))

            detector.detect_async(frame)

            doc, status, hands = pump.snapshot()
            frame = draw_scene(frame, doc, status, hands)
            cv2.imshow("Gesture Canvas", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break
    finally:
        pump.stop()
        detector.close()
        cap.release()
        cv2.destroyAllWindows()
    return 0


if __name__ == "__main__":
    sys.exit(main())
