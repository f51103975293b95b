# services/face_monitor/postprocessing.py
from typing import Any, List, Mapping, Optional

import numpy as np

from core.exceptions import InferenceError
from core.models import BoundingBox, Detection

# [image_id, class_id, confidence, x_min, y_min, x_max, y_max]
DETECTION_RECORD_SIZE = 7


def decode_detections(output: Any,
                      frame_width: int,
                      frame_height: int,
                      confidence_threshold: float = 0.5,
                      class_names: Optional[Mapping[int, str]] = None) -> List[Detection]:
    """
    Decode an SSD-style output tensor (typically [1, 1, N, 7]) into detections.

    Coordinates in the records are normalized to [0, 1]; they are scaled to the
    frame size, truncated to int and clamped to the frame. Records stop at the
    first negative image_id.
    """
    records = np.asarray(output, dtype=np.float32).reshape(-1)
    if records.size % DETECTION_RECORD_SIZE != 0:
        raise InferenceError(
            f"Output size {records.size} is not a multiple of {DETECTION_RECORD_SIZE}"
        )
    records = records.reshape(-1, DETECTION_RECORD_SIZE)

    detections = []
    for image_id, class_id, confidence, x_min, y_min, x_max, y_max in records:
        if image_id < 0:
            break
        if confidence <= confidence_threshold:
            continue

        x1 = _clamp(int(x_min * frame_width), frame_width)
        y1 = _clamp(int(y_min * frame_height), frame_height)
        x2 = _clamp(int(x_max * frame_width), frame_width)
        y2 = _clamp(int(y_max * frame_height), frame_height)

        detections.append(_create_detection(int(class_id), float(confidence),
                                            x1, y1, x2, y2, class_names))
    return detections


def _clamp(value: int, upper: int) -> int:
    return max(0, min(upper, value))


def _create_detection(class_id: int, confidence: float,
                      x1: int, y1: int, x2: int, y2: int,
                      class_names: Optional[Mapping[int, str]]) -> Detection:
    class_name = (class_names or {}).get(class_id, f"class_{class_id}")
    return Detection(
        class_id=class_id,
        class_name=class_name,
        confidence=confidence,
        bbox=BoundingBox(x=x1, y=y1, width=max(0, x2 - x1), height=max(0, y2 - y1))
    )
