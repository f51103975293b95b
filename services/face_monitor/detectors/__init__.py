from pathlib import Path
from typing import Dict, List, Optional, Type

from core.enums import InferenceBackend, PreprocessMode
from core.exceptions import ModelConfigurationError
from shared.config.model_configs import ModelConfig
from .base_detector import BaseDetector
from .openvino_detector import OpenVINODetector
from .opencv_dnn_detector import OpenCVDnnDetector


class DetectorFactory:
    """Factory class to create detector instances"""

    _detector_registry: Dict[InferenceBackend, Type[BaseDetector]] = {
        InferenceBackend.OPENVINO: OpenVINODetector,
        InferenceBackend.OPENCV_DNN: OpenCVDnnDetector,
    }

    @classmethod
    def register_detector(cls, backend: InferenceBackend, detector_class: Type[BaseDetector]):
        """Register detector class for a backend"""
        cls._detector_registry[backend] = detector_class

    @classmethod
    def create_detector(cls,
                        model_config: ModelConfig,
                        model_path: Path,
                        device: str = "CPU",
                        confidence_threshold: Optional[float] = None,
                        preprocess_mode: PreprocessMode = PreprocessMode.MODEL) -> BaseDetector:
        """Create detector instance for the model's backend"""
        detector_class = cls._detector_registry.get(model_config.backend)
        if detector_class is None:
            raise ModelConfigurationError(f"No detector registered for backend: {model_config.backend}")

        return detector_class(model_config, model_path, device, confidence_threshold,
                              preprocess_mode=preprocess_mode)

    @classmethod
    def get_supported_backends(cls) -> List[InferenceBackend]:
        """Get list of supported backends"""
        return list(cls._detector_registry.keys())


create_detector = DetectorFactory.create_detector

__all__ = [
    'BaseDetector',
    'OpenVINODetector',
    'OpenCVDnnDetector',
    'DetectorFactory',
    'create_detector'
]
