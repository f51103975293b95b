import pytest
from pydantic import ValidationError

from app.settings import FaceDetectionConfig, Settings
from core.enums import LogFormat, PreprocessMode


def test_defaults_match_demo_behaviour() -> None:
    config = Settings(_env_file=None)
    assert config.video_source == 0
    assert config.window_name == "frame"
    assert config.overlay_color == (0, 0, 255)
    assert config.face_detection.detector_model == "face-detection-0200"
    assert config.face_detection.confidence_threshold == 0.5
    assert config.face_detection.preprocess_mode == PreprocessMode.MODEL


def test_video_source_keeps_paths_and_urls() -> None:
    assert Settings(_env_file=None, camera_source="rtsp://cam/1").video_source == "rtsp://cam/1"
    assert Settings(_env_file=None, camera_source=" 2 ").video_source == 2


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("CAMERA_SOURCE", "clip.mp4")
    monkeypatch.setenv("LOG_FORMAT", "json")
    monkeypatch.setenv("FACE_DETECTION__DEVICE", "GPU")
    monkeypatch.setenv("FACE_DETECTION__PREPROCESS_MODE", "host")

    config = Settings(_env_file=None)

    assert config.video_source == "clip.mp4"
    assert config.log_format == LogFormat.JSON
    assert config.face_detection.device == "GPU"
    assert config.face_detection.preprocess_mode == PreprocessMode.HOST


def test_debug_forces_debug_log_level() -> None:
    assert Settings(_env_file=None, debug=True, log_level="warning").effective_log_level == "DEBUG"
    assert Settings(_env_file=None, log_level="warning").effective_log_level == "WARNING"


@pytest.mark.parametrize("threshold", [-0.1, 1.5])
def test_threshold_out_of_range_is_rejected(threshold) -> None:
    with pytest.raises(ValidationError):
        FaceDetectionConfig(confidence_threshold=threshold)


def test_invalid_application_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, quit_key="quit")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, prometheus_port=0)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_frames=0)
