# Shared pytest fixtures; living at the repo root also puts the top-level packages on sys.path.
from pathlib import Path
from typing import List, Optional

import numpy as np
import pytest

from core.enums import InferenceBackend
from services.face_monitor.detectors.base_detector import BaseDetector
from shared.config.model_configs import ModelConfigs


def make_records(*rows, total: int = 0) -> np.ndarray:
    """Build a [1, 1, N, 7] SSD output; rows are 7-float records, padded with zeros up to total."""
    records = [list(r) for r in rows]
    while len(records) < total:
        records.append([0.0] * 7)
    return np.array(records, dtype=np.float32).reshape(1, 1, -1, 7)


class FakeDetector(BaseDetector):
    """Detector returning a canned output tensor"""

    backend = InferenceBackend.OPENVINO

    def __init__(self, output: np.ndarray, **kwargs):
        super().__init__(ModelConfigs.FACE_DETECTION_0200, Path("unused.xml"), **kwargs)
        self.output = output
        self.loaded_with = None
        self.seen_blobs: List[np.ndarray] = []

    def load_model(self, frame_size=None) -> None:
        self.loaded_with = frame_size
        self.is_loaded = True

    def preprocess_frame(self, frame: np.ndarray) -> np.ndarray:
        return frame[np.newaxis, ...]

    def infer(self, blob: np.ndarray) -> np.ndarray:
        self.seen_blobs.append(blob)
        return self.output


class FakeVideoSource:
    """In-memory replacement for VideoSource"""

    def __init__(self, frames: List[np.ndarray], frame_size=(64, 48)):
        self.source = "fake"
        self._frames = list(frames)
        self._frame_size = frame_size
        self.opened = False
        self.closed = False
        self.read_calls = 0

    @property
    def is_opened(self) -> bool:
        return self.opened

    @property
    def frame_size(self):
        return self._frame_size

    def open(self) -> bool:
        self.opened = True
        return True

    def read_frame(self) -> Optional[np.ndarray]:
        self.read_calls += 1
        if not self._frames:
            return None
        return self._frames.pop(0)

    def close(self):
        self.closed = True


@pytest.fixture
def frame() -> np.ndarray:
    return np.zeros((48, 64, 3), dtype=np.uint8)


@pytest.fixture
def fake_detector_factory():
    return FakeDetector


@pytest.fixture
def fake_source_factory():
    return FakeVideoSource


@pytest.fixture
def records():
    return make_records
