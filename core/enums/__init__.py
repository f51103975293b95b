"""
Core enumerations package for the FaceCam demo.
"""

from .model_types import InferenceBackend, PreprocessMode
from .status_types import LogFormat, LogLevel

__all__ = [
    # Model types
    'InferenceBackend',
    'PreprocessMode',

    # Status types
    'LogFormat',
    'LogLevel'
]
