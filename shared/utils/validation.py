# shared/utils/validation.py

from typing import Any, Sequence

import numpy as np

class ValidationError(ValueError):
    """Custom exception for validation errors."""
    pass

def validate_frame(frame: Any, channels: int = 3) -> np.ndarray:
    """
    Validate a video frame before inference.

    Args:
        frame (Any): Candidate frame, normally a BGR image from cv2.VideoCapture.
        channels (int): Expected number of color channels.

    Returns:
        np.ndarray: The frame itself, if valid. Raises ValidationError if invalid.
    """
    if frame is None:
        raise ValidationError("Frame is None")

    if not isinstance(frame, np.ndarray):
        raise ValidationError(f"Frame is not a numpy array: {type(frame).__name__}")

    if frame.ndim != 3 or frame.shape[2] != channels:
        raise ValidationError(f"Expected HxWx{channels} frame, got shape {frame.shape}")

    if frame.shape[0] == 0 or frame.shape[1] == 0:
        raise ValidationError(f"Frame is empty: {frame.shape}")

    return frame

def validate_channel_params(mean: Sequence[float], std: Sequence[float], channels: int) -> None:
    """Check per-channel normalization parameters against the channel count."""
    if len(mean) != channels or len(std) != channels:
        raise ValidationError(
            f"Expected {channels} mean/std values, got {len(mean)} mean and {len(std)} std"
        )
    if any(s == 0 for s in std):
        raise ValidationError(f"std must not contain zeros: {list(std)}")
