# services/face_monitor/detectors/openvino_detector.py
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import openvino as ov
from openvino.preprocess import PrePostProcessor, ResizeAlgorithm

from core.enums import InferenceBackend, PreprocessMode
from core.exceptions import InferenceError, ModelLoadError
from services.face_monitor.detectors.base_detector import BaseDetector
from services.face_monitor.preprocessing import as_nhwc_tensor, prepare_input
from shared.config.model_configs import ModelConfig
from shared.decorators.timing import time_execution


class OpenVINODetector(BaseDetector):
    """Face detection with an OpenVINO IR model (.xml + .bin)"""

    backend = InferenceBackend.OPENVINO

    def __init__(self,
                 model_config: ModelConfig,
                 model_path: Path,
                 device: str = "CPU",
                 confidence_threshold: Optional[float] = None,
                 preprocess_mode: PreprocessMode = PreprocessMode.MODEL,
                 core: Optional[ov.Core] = None):
        super().__init__(model_config, model_path, device, confidence_threshold)
        self.preprocess_mode = PreprocessMode(preprocess_mode)
        self.core = core

        # Engine objects
        self.model = None
        self.compiled_model = None
        self.infer_request = None
        self._compiled_frame_size: Optional[Tuple[int, int]] = None

    @time_execution
    def load_model(self, frame_size: Optional[Tuple[int, int]] = None) -> None:
        """Read the IR model and compile it for the configured device"""
        self.logger.info(f"🔧 Loading OpenVINO model {self.model_path} on {self.device} "
                         f"(preprocess: {self.preprocess_mode.value})")
        try:
            if self.core is None:
                self.core = ov.Core()
            self.model = self.core.read_model(str(self.model_path))

            if self.preprocess_mode == PreprocessMode.HOST:
                self._compile(self.model)
                self.input_size = self._model_input_size()
            elif frame_size is not None:
                self._compile_for_frame_size(frame_size)
        except ModelLoadError:
            raise
        except Exception as e:
            raise ModelLoadError(f"Failed to load OpenVINO model {self.model_path}: {e}") from e

        self.is_loaded = True
        self.logger.info(f"✅ OpenVINO face detector loaded: {self.config.name}")

    def preprocess_frame(self, frame: np.ndarray) -> np.ndarray:
        if self.preprocess_mode == PreprocessMode.HOST:
            return prepare_input(
                frame,
                self.input_size,
                mean=self.config.mean,
                std=self.config.std,
                swap_rb=self.config.swap_rb
            )

        # Resize and layout conversion run inside the compiled model
        frame_size = (frame.shape[1], frame.shape[0])
        if frame_size != self._compiled_frame_size:
            if self._compiled_frame_size is not None:
                self.logger.warning(f"⚠️ Frame size changed {self._compiled_frame_size} -> {frame_size}, "
                                    f"rebuilding model")
            self._compile_for_frame_size(frame_size)
        return as_nhwc_tensor(frame)

    def infer(self, blob: np.ndarray) -> np.ndarray:
        try:
            self.infer_request.infer({0: blob})
            return self.infer_request.get_output_tensor(0).data
        except Exception as e:
            raise InferenceError(f"OpenVINO inference failed: {e}") from e

    def unload_model(self):
        self.infer_request = None
        self.compiled_model = None
        self.model = None
        self._compiled_frame_size = None
        super().unload_model()

    def _compile_for_frame_size(self, frame_size: Tuple[int, int]) -> None:
        try:
            self._compile(self._build_preprocessed_model(frame_size))
        except Exception as e:
            raise ModelLoadError(f"Failed to build model for frame size {frame_size}: {e}") from e
        self._compiled_frame_size = frame_size

    def _build_preprocessed_model(self, frame_size: Tuple[int, int]):
        """Embed u8 NHWC -> f32 NCHW conversion and resize into a copy of the model graph"""
        width, height = frame_size
        # build() rewrites its model in place; self.model stays the untouched IR
        ppp = PrePostProcessor(self.model.clone())
        ppp.input().tensor() \
            .set_element_type(ov.Type.u8) \
            .set_layout(ov.Layout("NHWC")) \
            .set_spatial_static_shape(height, width)
        ppp.input().model().set_layout(ov.Layout("NCHW"))
        ppp.input().preprocess().resize(ResizeAlgorithm.RESIZE_LINEAR)
        return ppp.build()

    def _compile(self, model) -> None:
        self.compiled_model = self.core.compile_model(model, self.device)
        self.infer_request = self.compiled_model.create_infer_request()
        self.logger.info(f"📐 Model input shape: {self.compiled_model.input(0).shape}")

    def _model_input_size(self) -> Tuple[int, int]:
        """(width, height) of an NCHW model input"""
        shape = [int(d) for d in self.compiled_model.input(0).shape]
        if len(shape) != 4:
            raise ModelLoadError(f"Expected 4-D NCHW input, got {shape}")
        return (shape[3], shape[2])
