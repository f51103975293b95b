# core/exceptions.py
from typing import Optional

class FaceCamException(Exception):
    """Base exception for FaceCam OpenVINO Demo"""
    pass

class ModelConfigurationError(FaceCamException):
    """Unknown model or invalid model configuration"""
    pass

class ModelDownloadError(FaceCamException):
    """Model download related errors"""
    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code

class ModelLoadError(FaceCamException):
    """Model could not be read or compiled by the inference engine"""
    pass

class CameraError(FaceCamException):
    """Video source related errors"""
    pass

class InferenceError(FaceCamException):
    """Errors while running or decoding an inference"""
    pass
