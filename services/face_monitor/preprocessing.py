# services/face_monitor/preprocessing.py
"""
Frame -> input tensor conversion for detectors that take NCHW float input.

The recipe is fixed by the models' published interface: resize to the network
input, optionally swap BGR to RGB, normalize each channel with its own mean and
std, then pack the planes channel-first with a leading batch dimension.
"""

from typing import List, Sequence, Tuple

import cv2
import numpy as np

from shared.utils.validation import ValidationError, validate_channel_params


def split_channels(image: np.ndarray) -> List[np.ndarray]:
    """Split an HxWxC image into C planes of HxW"""
    if image.ndim != 3:
        raise ValidationError(f"Expected HxWxC image, got shape {image.shape}")
    return [image[:, :, c] for c in range(image.shape[2])]


def normalize_channels(channels: Sequence[np.ndarray],
                       mean: Sequence[float],
                       std: Sequence[float]) -> List[np.ndarray]:
    """(plane - mean[c]) / std[c] for every plane, as float32"""
    validate_channel_params(mean, std, len(channels))
    return [
        (plane.astype(np.float32) - np.float32(m)) / np.float32(s)
        for plane, m, s in zip(channels, mean, std)
    ]


def pack_chw(channels: Sequence[np.ndarray]) -> np.ndarray:
    """Stack planes into a contiguous (1, C, H, W) float32 tensor"""
    if not channels:
        raise ValidationError("No channels to pack")
    tensor = np.stack(channels, axis=0).astype(np.float32, copy=False)
    return np.ascontiguousarray(tensor[np.newaxis, ...])


def prepare_input(frame: np.ndarray,
                  input_size: Tuple[int, int],
                  mean: Sequence[float] = (0.0, 0.0, 0.0),
                  std: Sequence[float] = (1.0, 1.0, 1.0),
                  swap_rb: bool = False) -> np.ndarray:
    """
    Build the network input tensor from a BGR frame.

    Args:
        frame: HxWx3 uint8 image.
        input_size: Network input as (width, height).
        mean: Per-channel mean, in the channel order fed to the network.
        std: Per-channel std, same order as mean.
        swap_rb: Convert BGR to RGB before normalizing.

    Returns:
        (1, 3, height, width) float32 tensor.
    """
    width, height = input_size
    if frame.shape[1] != width or frame.shape[0] != height:
        frame = cv2.resize(frame, (width, height), interpolation=cv2.INTER_LINEAR)
    if swap_rb:
        frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    channels = split_channels(frame)
    return pack_chw(normalize_channels(channels, mean, std))


def as_nhwc_tensor(frame: np.ndarray) -> np.ndarray:
    """Wrap a raw HxWxC uint8 frame as a (1, H, W, C) tensor without copying when possible"""
    return np.ascontiguousarray(frame, dtype=np.uint8)[np.newaxis, ...]
