# services/face_monitor/renderer.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

import cv2
import numpy as np

from core.models import Detection, DetectionOutput, FrameTimings

RED = (0, 0, 255)
FONT = cv2.FONT_HERSHEY_PLAIN
FONT_SCALE = 1
TIMING_ORIGIN_X = 10
TIMING_LINE_HEIGHT = 20


def confidence_label(confidence: float) -> str:
    """Whole percent, halves rounded away from zero (0.625 -> 63%)"""
    percent = (Decimal(float(confidence)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{percent}%"


def draw_detections(frame: np.ndarray, detections: Iterable[Detection],
                    color: Tuple[int, int, int] = RED) -> None:
    """Confidence label at the box's top-left corner, then the box"""
    for detection in detections:
        bbox = detection.bbox
        cv2.putText(frame, confidence_label(detection.confidence), bbox.top_left,
                    FONT, FONT_SCALE, color)
        cv2.rectangle(frame, bbox.top_left, bbox.bottom_right, color)


def timing_lines(timings: FrameTimings) -> list:
    return [
        f"Preprocess: {timings.preprocess_ms:.2f}ms",
        f"Infer: {timings.infer_ms:.2f}ms",
        f"Postprocess: {timings.postprocess_ms:.2f}ms",
        f"Total: {timings.total_ms:.2f}ms",
    ]


def draw_timings(frame: np.ndarray, timings: FrameTimings,
                 color: Tuple[int, int, int] = RED) -> None:
    for i, line in enumerate(timing_lines(timings), start=1):
        cv2.putText(frame, line, (TIMING_ORIGIN_X, TIMING_LINE_HEIGHT * i),
                    FONT, FONT_SCALE, color)


class FrameRenderer:
    """Draws detections and timings; optionally shows the frame in a window"""

    def __init__(self,
                 window_name: str = "frame",
                 color: Tuple[int, int, int] = RED,
                 show_window: bool = True,
                 quit_key: str = "q"):
        self.window_name = window_name
        self.color = tuple(color)
        self.show_window = show_window
        self.quit_key = quit_key
        self._window_opened = False
        self.logger = logging.getLogger(__name__)

    def render(self, frame: np.ndarray, output: DetectionOutput) -> bool:
        """Draw onto frame in place. Returns False when the user asked to quit."""
        draw_detections(frame, output.detections, self.color)
        draw_timings(frame, output.timings, self.color)

        if not self.show_window:
            return True

        cv2.imshow(self.window_name, frame)
        self._window_opened = True
        key = cv2.waitKey(1) & 0xFF
        if key == ord(self.quit_key):
            self.logger.info(f"⌨️ Quit key '{self.quit_key}' pressed")
            return False
        if cv2.getWindowProperty(self.window_name, cv2.WND_PROP_VISIBLE) < 1:
            self.logger.info("🪟 Window closed")
            return False
        return True

    def close(self) -> None:
        if self._window_opened:
            cv2.destroyWindow(self.window_name)
            self._window_opened = False
