import cv2
import logging
import numpy as np
from typing import Iterator, Optional, Tuple, Union

logger = logging.getLogger(__name__)

class VideoSource:
    """Local camera (by index) or video file / stream URL"""

    def __init__(self, source: Union[int, str] = 0, buffer_size: int = 1):
        self.source = source
        self.buffer_size = buffer_size
        self.capture = None

    def open(self) -> bool:
        if isinstance(self.source, str) and self.source.strip() == "":
            logger.error("Video source is empty")
            return False

        self.capture = cv2.VideoCapture(self.source)
        # Keep only the newest frame for live sources
        self.capture.set(cv2.CAP_PROP_BUFFERSIZE, self.buffer_size)

        if not self.capture.isOpened():
            logger.error("Failed to open video source: %s", self.source)
            return False

        logger.info("Video source opened: %s (%dx%d)", self.source, *self.frame_size)
        return True

    @property
    def is_opened(self) -> bool:
        return self.capture is not None and self.capture.isOpened()

    @property
    def frame_size(self) -> Tuple[int, int]:
        """(width, height) reported by the capture backend"""
        if self.capture is None:
            return (0, 0)
        return (
            int(self.capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self.capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        )

    def read_frame(self) -> Optional[np.ndarray]:
        """Grab and decode the next frame; None at end of stream"""
        if not self.is_opened:
            return None
        if not self.capture.grab():
            return None
        ret, frame = self.capture.retrieve()
        return frame if ret else None

    def frames(self) -> Iterator[np.ndarray]:
        while True:
            frame = self.read_frame()
            if frame is None:
                return
            yield frame

    def close(self):
        if self.capture is not None:
            self.capture.release()
            self.capture = None
            logger.info("Video source closed: %s", self.source)

    def __enter__(self) -> "VideoSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
