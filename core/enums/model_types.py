"""
Model type enumerations for the FaceCam demo.
"""

from enum import Enum


class InferenceBackend(str, Enum):
    """Inference engines able to run a face detector"""
    OPENVINO = "openvino"
    OPENCV_DNN = "opencv_dnn"


class PreprocessMode(str, Enum):
    """Where frame preprocessing happens"""
    MODEL = "model"  # embedded into the compiled model graph
    HOST = "host"    # numpy on the host before inference
