# services/face_monitor/detectors/base_detector.py
import logging
import numpy as np
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple

from core.enums import InferenceBackend
from core.exceptions import InferenceError
from core.models import Detection, DetectionOutput, FrameTimings
from services.face_monitor.postprocessing import decode_detections
from shared.config.model_configs import ModelConfig
from shared.decorators.timing import Stopwatch
from shared.utils.validation import ValidationError, validate_frame


class BaseDetector(ABC):
    """Base class for all face detectors"""

    backend: InferenceBackend

    def __init__(self,
                 model_config: ModelConfig,
                 model_path: Path,
                 device: str = "CPU",
                 confidence_threshold: Optional[float] = None):
        self.config = model_config
        self.model_path = Path(model_path)
        self.device = device
        self.confidence_threshold = (
            confidence_threshold if confidence_threshold is not None
            else model_config.confidence_threshold
        )
        self.input_size: Tuple[int, int] = model_config.input_size
        self.is_loaded = False
        self.logger = logging.getLogger(self.__class__.__module__)

        # Performance tracking
        self.total_inferences = 0
        self.total_processing_time = 0.0
        self.last_inference_time = 0.0

    @abstractmethod
    def load_model(self, frame_size: Optional[Tuple[int, int]] = None) -> None:
        """Load and compile the model. frame_size is (width, height) of the source frames."""
        pass

    @abstractmethod
    def preprocess_frame(self, frame: np.ndarray) -> np.ndarray:
        """Turn a BGR frame into the model input tensor"""
        pass

    @abstractmethod
    def infer(self, blob: np.ndarray) -> np.ndarray:
        """Run the model on one input tensor and return the raw output"""
        pass

    def postprocess_output(self, raw_output: Any, frame_shape: Tuple[int, int]) -> List[Detection]:
        """Decode raw model output; frame_shape is (height, width)"""
        height, width = frame_shape
        return decode_detections(
            raw_output,
            frame_width=width,
            frame_height=height,
            confidence_threshold=self.confidence_threshold,
            class_names=self.config.class_names
        )

    def detect(self, frame: np.ndarray) -> DetectionOutput:
        """Run preprocess, inference and postprocess on one frame, timing each stage"""
        if not self.is_loaded:
            raise InferenceError(f"{self.__class__.__name__} model is not loaded")
        try:
            validate_frame(frame)
        except ValidationError as e:
            raise InferenceError(f"Invalid frame: {e}") from e

        timings = FrameTimings()
        stopwatch = Stopwatch()

        blob = self.preprocess_frame(frame)
        timings.preprocess_ms = stopwatch.lap()

        raw_output = self.infer(blob)
        timings.infer_ms = stopwatch.lap()

        detections = self.postprocess_output(raw_output, frame.shape[:2])
        timings.postprocess_ms = stopwatch.lap()

        self._update_statistics(timings.total_ms)
        return DetectionOutput(
            detections=detections,
            timings=timings,
            frame_size=(frame.shape[1], frame.shape[0])
        )

    def unload_model(self):
        """Release engine resources"""
        self.is_loaded = False
        self.logger.info(f"{self.__class__.__name__} model unloaded")

    def get_statistics(self) -> Dict[str, Any]:
        """Get detector statistics"""
        avg_processing_time = (
            self.total_processing_time / self.total_inferences
            if self.total_inferences > 0 else 0
        )

        return {
            'backend': self.backend.value,
            'model': self.config.name,
            'is_loaded': self.is_loaded,
            'total_inferences': self.total_inferences,
            'average_processing_time_ms': avg_processing_time,
            'last_inference_time_ms': self.last_inference_time,
            'config': {
                'confidence_threshold': self.confidence_threshold,
                'input_size': self.input_size,
                'device': self.device
            }
        }

    def _update_statistics(self, processing_time: float):
        """Update processing statistics"""
        self.total_inferences += 1
        self.total_processing_time += processing_time
        self.last_inference_time = processing_time

    def __enter__(self) -> "BaseDetector":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.unload_model()
