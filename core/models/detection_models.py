# core/models/detection_models.py
from dataclasses import dataclass, asdict, field
from typing import List, Dict, Any, Tuple


@dataclass
class BoundingBox:
    """Bounding box in pixel coordinates of the source frame"""
    x: int  # Left
    y: int  # Top
    width: int
    height: int

    @property
    def top_left(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def bottom_right(self) -> Tuple[int, int]:
        return (self.x + self.width, self.y + self.height)

    def to_dict(self) -> Dict[str, int]:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height
        }

    def to_xyxy(self) -> tuple:
        """Convert to (x1, y1, x2, y2) format"""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass
class Detection:
    """One decoded detection record"""
    class_id: int
    class_name: str
    confidence: float
    bbox: BoundingBox

    def to_dict(self) -> Dict[str, Any]:
        return {
            'class_id': self.class_id,
            'class_name': self.class_name,
            'confidence': self.confidence,
            'bbox': self.bbox.to_dict()
        }


@dataclass
class FrameTimings:
    """Per-stage wall time of one frame, in milliseconds"""
    preprocess_ms: float = 0.0
    infer_ms: float = 0.0
    postprocess_ms: float = 0.0

    @property
    def total_ms(self) -> float:
        return self.preprocess_ms + self.infer_ms + self.postprocess_ms

    def to_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data['total_ms'] = self.total_ms
        return data


@dataclass
class DetectionOutput:
    """Output from detector inference on one frame"""
    detections: List[Detection]
    timings: FrameTimings
    frame_size: Tuple[int, int]  # (width, height)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def detection_count(self) -> int:
        return len(self.detections)

    @property
    def max_confidence(self) -> float:
        if not self.detections:
            return 0.0
        return max(d.confidence for d in self.detections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'detections': [d.to_dict() for d in self.detections],
            'timings': self.timings.to_dict(),
            'frame_size': self.frame_size,
            'detection_count': self.detection_count,
            'metadata': self.metadata
        }
