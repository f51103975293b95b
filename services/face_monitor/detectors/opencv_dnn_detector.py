# services/face_monitor/detectors/opencv_dnn_detector.py
import cv2
import numpy as np
from pathlib import Path
from typing import Optional, Tuple

from core.enums import InferenceBackend, PreprocessMode
from core.exceptions import InferenceError, ModelLoadError
from services.face_monitor.detectors.base_detector import BaseDetector
from services.face_monitor.preprocessing import prepare_input
from shared.config.model_configs import ModelConfig
from shared.decorators.timing import time_execution


class OpenCVDnnDetector(BaseDetector):
    """Face Detection using OpenCV DNN (Caffe ResNet-10 SSD)"""

    backend = InferenceBackend.OPENCV_DNN

    def __init__(self,
                 model_config: ModelConfig,
                 model_path: Path,
                 device: str = "cpu",
                 confidence_threshold: Optional[float] = None,
                 preprocess_mode: PreprocessMode = PreprocessMode.HOST):
        # cv2.dnn has no in-graph preprocessing; frames always go through prepare_input
        super().__init__(model_config, model_path, device, confidence_threshold)
        self.net = None

    @time_execution
    def load_model(self, frame_size: Optional[Tuple[int, int]] = None) -> None:
        """Load Caffe prototxt + caffemodel next to model_path"""
        prototxt_path = self.model_path
        caffemodel_path = self.model_path.parent / self.config.weights_file

        if not prototxt_path.exists() or not caffemodel_path.exists():
            raise ModelLoadError(f"Face detection model files not found: {prototxt_path}, {caffemodel_path}")

        try:
            self.net = cv2.dnn.readNetFromCaffe(str(prototxt_path), str(caffemodel_path))
        except cv2.error as e:
            raise ModelLoadError(f"Failed to load OpenCV DNN face detector: {e}") from e

        if self.device.lower() in ("cuda", "gpu") and cv2.cuda.getCudaEnabledDeviceCount() > 0:
            self.net.setPreferableBackend(cv2.dnn.DNN_BACKEND_CUDA)
            self.net.setPreferableTarget(cv2.dnn.DNN_TARGET_CUDA)
            self.logger.info("✅ Using CUDA backend for face detection")
        else:
            self.net.setPreferableBackend(cv2.dnn.DNN_BACKEND_OPENCV)
            self.net.setPreferableTarget(cv2.dnn.DNN_TARGET_CPU)
            self.logger.info("✅ Using CPU backend for face detection")

        self.is_loaded = True
        self.logger.info("✅ OpenCV DNN Face Detector loaded successfully")

    def preprocess_frame(self, frame: np.ndarray) -> np.ndarray:
        return prepare_input(
            frame,
            self.input_size,
            mean=self.config.mean,
            std=self.config.std,
            swap_rb=self.config.swap_rb
        )

    def infer(self, blob: np.ndarray) -> np.ndarray:
        try:
            self.net.setInput(blob)
            return self.net.forward()
        except cv2.error as e:
            raise InferenceError(f"OpenCV DNN inference failed: {e}") from e

    def unload_model(self):
        self.net = None
        super().unload_model()
