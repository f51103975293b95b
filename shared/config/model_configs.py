# ================================================================================================
# shared/config/model_configs.py - Face Detection Model Configurations
# ================================================================================================

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from core.enums import InferenceBackend
from core.exceptions import ModelConfigurationError

OPEN_MODEL_ZOO_URL = "https://storage.openvinotoolkit.org/repositories/open_model_zoo/2021.4/models_bin/2"
OPENCV_FACE_DETECTOR_URL = "https://raw.githubusercontent.com/opencv/opencv/4.x/samples/dnn/face_detector"
OPENCV_3RDPARTY_URL = "https://raw.githubusercontent.com/opencv/opencv_3rdparty/dnn_samples_face_detector_20170830"

@dataclass
class ModelConfig:
    """Configuration for a face detection model"""
    name: str
    backend: InferenceBackend
    topology_file: str  # .xml / .prototxt
    weights_file: str   # .bin / .caffemodel
    urls: Dict[str, str]  # filename -> download URL
    input_size: Tuple[int, int]  # (width, height)
    mean: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    std: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    swap_rb: bool = False  # models below expect BGR
    confidence_threshold: float = 0.5
    class_names: Dict[int, str] = field(default_factory=dict)

    @property
    def files(self) -> List[str]:
        return [self.topology_file, self.weights_file]

class ModelConfigs:
    """Centralized model configurations"""

    # =============================================================================
    # Open Model Zoo (OpenVINO IR)
    # =============================================================================

    # Output: [1, 1, 200, 7] records of [image_id, label, conf, x_min, y_min, x_max, y_max]
    FACE_DETECTION_0200 = ModelConfig(
        name="face-detection-0200",
        backend=InferenceBackend.OPENVINO,
        topology_file="face-detection-0200.xml",
        weights_file="face-detection-0200.bin",
        urls={
            "face-detection-0200.xml": f"{OPEN_MODEL_ZOO_URL}/face-detection-0200/FP16/face-detection-0200.xml",
            "face-detection-0200.bin": f"{OPEN_MODEL_ZOO_URL}/face-detection-0200/FP16/face-detection-0200.bin",
        },
        input_size=(256, 256),
        class_names={0: "face"}
    )

    # =============================================================================
    # OpenCV DNN (Caffe ResNet-10 SSD)
    # =============================================================================

    RES10_SSD = ModelConfig(
        name="res10-300x300-ssd",
        backend=InferenceBackend.OPENCV_DNN,
        topology_file="deploy.prototxt",
        weights_file="res10_300x300_ssd_iter_140000.caffemodel",
        urls={
            "deploy.prototxt": f"{OPENCV_FACE_DETECTOR_URL}/deploy.prototxt",
            "res10_300x300_ssd_iter_140000.caffemodel": f"{OPENCV_3RDPARTY_URL}/res10_300x300_ssd_iter_140000.caffemodel",
        },
        input_size=(300, 300),
        mean=(104.0, 177.0, 123.0),
        class_names={1: "face"}
    )

    @classmethod
    def get_all_models(cls) -> Dict[str, ModelConfig]:
        """Get all model configurations"""
        return {
            cls.FACE_DETECTION_0200.name: cls.FACE_DETECTION_0200,
            cls.RES10_SSD.name: cls.RES10_SSD
        }

    @classmethod
    def get(cls, name: str) -> ModelConfig:
        """Get model configuration by name"""
        models = cls.get_all_models()
        if name not in models:
            raise ModelConfigurationError(
                f"Unknown model '{name}'. Available: {sorted(models)}"
            )
        return models[name]

    @classmethod
    def get_models_by_backend(cls, backend: InferenceBackend) -> Dict[str, ModelConfig]:
        """Get models runnable by one inference backend"""
        return {name: config for name, config in cls.get_all_models().items()
                if config.backend == backend}
