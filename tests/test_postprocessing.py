import numpy as np
import pytest

from core.exceptions import InferenceError
from services.face_monitor.postprocessing import decode_detections


def test_decode_scales_normalized_box_to_frame(records) -> None:
    output = records([0, 0, 0.9, 0.1, 0.2, 0.5, 0.6], total=200)
    detections = decode_detections(output, frame_width=640, frame_height=480)

    assert len(detections) == 1
    face = detections[0]
    assert face.class_id == 0
    assert face.confidence == pytest.approx(0.9)
    assert face.bbox.to_xyxy() == (64, 96, 320, 288)
    assert face.bbox.width == 256
    assert face.bbox.height == 192


def test_threshold_is_strict(records) -> None:
    output = records(
        [0, 0, 0.5, 0.1, 0.1, 0.2, 0.2],
        [0, 0, 0.51, 0.1, 0.1, 0.2, 0.2],
    )
    detections = decode_detections(output, 100, 100, confidence_threshold=0.5)
    assert [round(d.confidence, 2) for d in detections] == [0.51]


def test_coordinates_truncate_toward_zero(records) -> None:
    output = records([0, 0, 0.8, 0.0999, 0.0, 0.1999, 0.5])
    face = decode_detections(output, 100, 10)[0]
    assert face.bbox.x == 9
    assert face.bbox.bottom_right == (19, 5)


def test_boxes_are_clamped_to_frame(records) -> None:
    output = records([0, 0, 0.8, -0.05, -0.1, 1.2, 1.01])
    face = decode_detections(output, 200, 100)[0]
    assert face.bbox.to_xyxy() == (0, 0, 200, 100)


def test_decoding_stops_at_negative_image_id(records) -> None:
    output = records(
        [0, 0, 0.9, 0.1, 0.1, 0.2, 0.2],
        [-1, 0, 0.0, 0.0, 0.0, 0.0, 0.0],
        [0, 0, 0.9, 0.3, 0.3, 0.4, 0.4],
    )
    assert len(decode_detections(output, 100, 100)) == 1


def test_class_names_and_fallback(records) -> None:
    output = records(
        [0, 1, 0.9, 0.1, 0.1, 0.2, 0.2],
        [0, 3, 0.9, 0.1, 0.1, 0.2, 0.2],
    )
    names = [d.class_name for d in decode_detections(output, 100, 100, class_names={1: "face"})]
    assert names == ["face", "class_3"]


def test_empty_output_yields_no_detections() -> None:
    assert decode_detections(np.zeros((1, 1, 0, 7), dtype=np.float32), 100, 100) == []


def test_output_size_must_be_multiple_of_record_size() -> None:
    with pytest.raises(InferenceError):
        decode_detections(np.zeros(10, dtype=np.float32), 100, 100)
