import numpy as np
import pytest

from core.enums import InferenceBackend, PreprocessMode
from core.exceptions import InferenceError, ModelConfigurationError
from services.face_monitor.detectors import DetectorFactory, OpenCVDnnDetector, OpenVINODetector
from shared.config.model_configs import ModelConfig, ModelConfigs


def test_detect_times_every_stage_and_decodes(fake_detector_factory, records, frame) -> None:
    detector = fake_detector_factory(records([0, 0, 0.97, 0.25, 0.25, 0.75, 0.75]))
    detector.load_model(frame_size=(64, 48))

    output = detector.detect(frame)

    assert output.frame_size == (64, 48)
    assert output.detection_count == 1
    assert output.detections[0].class_name == "face"
    assert output.detections[0].bbox.to_xyxy() == (16, 12, 48, 36)
    timings = output.timings
    assert min(timings.preprocess_ms, timings.infer_ms, timings.postprocess_ms) >= 0.0
    assert timings.total_ms == pytest.approx(
        timings.preprocess_ms + timings.infer_ms + timings.postprocess_ms
    )


def test_detect_uses_configured_threshold(fake_detector_factory, records, frame) -> None:
    output = records([0, 0, 0.6, 0.1, 0.1, 0.2, 0.2])
    strict = fake_detector_factory(output, confidence_threshold=0.7)
    strict.load_model()
    assert strict.detect(frame).detections == []


def test_detect_requires_loaded_model(fake_detector_factory, records, frame) -> None:
    detector = fake_detector_factory(records())
    with pytest.raises(InferenceError):
        detector.detect(frame)


def test_detect_rejects_invalid_frames(fake_detector_factory, records) -> None:
    detector = fake_detector_factory(records())
    detector.load_model()
    with pytest.raises(InferenceError):
        detector.detect(None)
    with pytest.raises(InferenceError):
        detector.detect(np.zeros((10, 10), dtype=np.uint8))


def test_statistics_track_inferences(fake_detector_factory, records, frame) -> None:
    detector = fake_detector_factory(records())
    detector.load_model()
    detector.detect(frame)
    detector.detect(frame)

    stats = detector.get_statistics()
    assert stats['total_inferences'] == 2
    assert stats['model'] == "face-detection-0200"
    assert stats['config']['confidence_threshold'] == 0.5

    detector.unload_model()
    assert not detector.is_loaded


def test_factory_picks_backend_from_model_config(tmp_path) -> None:
    openvino_detector = DetectorFactory.create_detector(
        ModelConfigs.FACE_DETECTION_0200, tmp_path / "face-detection-0200.xml",
        preprocess_mode=PreprocessMode.HOST
    )
    assert isinstance(openvino_detector, OpenVINODetector)
    assert openvino_detector.preprocess_mode == PreprocessMode.HOST

    dnn_detector = DetectorFactory.create_detector(ModelConfigs.RES10_SSD, tmp_path / "deploy.prototxt")
    assert isinstance(dnn_detector, OpenCVDnnDetector)
    assert set(DetectorFactory.get_supported_backends()) == set(InferenceBackend)


def test_factory_rejects_unregistered_backend(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(DetectorFactory, "_detector_registry", {})
    with pytest.raises(ModelConfigurationError):
        DetectorFactory.create_detector(ModelConfigs.FACE_DETECTION_0200, tmp_path / "m.xml")


def test_opencv_dnn_missing_files_raise_model_load_error(tmp_path) -> None:
    from core.exceptions import ModelLoadError

    detector = OpenCVDnnDetector(ModelConfigs.RES10_SSD, tmp_path / "deploy.prototxt")
    with pytest.raises(ModelLoadError):
        detector.load_model()


def test_opencv_dnn_host_preprocessing_subtracts_caffe_mean(tmp_path, frame) -> None:
    detector = OpenCVDnnDetector(ModelConfigs.RES10_SSD, tmp_path / "deploy.prototxt")
    blob = detector.preprocess_frame(frame)
    assert blob.shape == (1, 3, 300, 300)
    assert blob[0, :, 0, 0].tolist() == pytest.approx([-104.0, -177.0, -123.0])


def test_registered_detector_receives_preprocess_mode(tmp_path, monkeypatch) -> None:
    class RecordingDetector(OpenCVDnnDetector):
        def __init__(self, *args, preprocess_mode=None, **kwargs):
            super().__init__(*args, **kwargs)
            self.preprocess_mode = preprocess_mode

    monkeypatch.setattr(DetectorFactory, "_detector_registry", dict(DetectorFactory._detector_registry))
    DetectorFactory.register_detector(InferenceBackend.OPENCV_DNN, RecordingDetector)

    detector = DetectorFactory.create_detector(ModelConfigs.RES10_SSD, tmp_path / "deploy.prototxt",
                                               preprocess_mode=PreprocessMode.MODEL)
    assert isinstance(detector, RecordingDetector)
    assert detector.preprocess_mode == PreprocessMode.MODEL


def test_opencv_dnn_detector_accepts_preprocess_mode(tmp_path) -> None:
    detector = OpenCVDnnDetector(ModelConfigs.RES10_SSD, tmp_path / "deploy.prototxt",
                                 preprocess_mode=PreprocessMode.MODEL)
    assert detector.net is None
