from core.models import BoundingBox, Detection, DetectionOutput, FrameTimings


def test_bounding_box_corners() -> None:
    bbox = BoundingBox(x=10, y=20, width=30, height=40)
    assert bbox.top_left == (10, 20)
    assert bbox.bottom_right == (40, 60)
    assert bbox.to_xyxy() == (10, 20, 40, 60)


def test_frame_timings_total() -> None:
    timings = FrameTimings(preprocess_ms=1.5, infer_ms=10.0, postprocess_ms=0.25)
    assert timings.total_ms == 11.75
    assert timings.to_dict()['total_ms'] == 11.75


def test_detection_output_summary() -> None:
    faces = [
        Detection(1, "face", 0.7, BoundingBox(0, 0, 5, 5)),
        Detection(1, "face", 0.9, BoundingBox(5, 5, 5, 5)),
    ]
    output = DetectionOutput(faces, FrameTimings(), frame_size=(64, 48))

    assert output.detection_count == 2
    assert output.max_confidence == 0.9
    data = output.to_dict()
    assert data['frame_size'] == (64, 48)
    assert data['detections'][1]['bbox'] == {'x': 5, 'y': 5, 'width': 5, 'height': 5}


def test_empty_output() -> None:
    output = DetectionOutput([], FrameTimings(), frame_size=(1, 1))
    assert output.detection_count == 0
    assert output.max_confidence == 0.0
