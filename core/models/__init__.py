# Core Models Package
"""
Core data models for the FaceCam demo.
Contains detection records, frame timings and detector outputs.
"""

from .detection_models import (
    BoundingBox,
    Detection,
    FrameTimings,
    DetectionOutput
)

__all__ = [
    'BoundingBox',
    'Detection',
    'FrameTimings',
    'DetectionOutput'
]
