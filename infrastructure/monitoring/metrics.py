# /infrastructure/monitoring/metrics.py
import time
import logging
from typing import List, Dict, Any, Optional
from collections import deque
from dataclasses import dataclass
import threading

# Prometheus
from prometheus_client import start_http_server, Gauge

from core.models import FrameTimings


@dataclass
class FrameMetric:
    """Metric for one processed frame"""
    preprocess_ms: float
    infer_ms: float
    postprocess_ms: float
    total_ms: float
    detection_count: int
    timestamp: float


class FrameMetrics:
    """Rolling frame timing and detection statistics"""

    def __init__(self, max_history: int = 300):
        self.logger = logging.getLogger(__name__)
        self.max_history = max_history
        self.lock = threading.Lock()

        self.frame_history: deque = deque(maxlen=max_history)

        # Performance counters
        self.total_frames = 0
        self.total_detections = 0
        self.start_time = time.time()

    def record_frame(self, timings: FrameTimings, detection_count: int):
        """Record the timings of one frame"""
        with self.lock:
            self.total_frames += 1
            self.total_detections += detection_count
            self.frame_history.append(FrameMetric(
                preprocess_ms=timings.preprocess_ms,
                infer_ms=timings.infer_ms,
                postprocess_ms=timings.postprocess_ms,
                total_ms=timings.total_ms,
                detection_count=detection_count,
                timestamp=time.time()
            ))

    def get_overall_stats(self) -> Dict[str, Any]:
        """Overall statistics; per-stage averages cover the recent history window"""
        with self.lock:
            uptime = time.time() - self.start_time
            recent = list(self.frame_history)

            return {
                'uptime_seconds': uptime,
                'total_frames': self.total_frames,
                'total_detections': self.total_detections,
                'avg_fps': self.total_frames / uptime if uptime > 0 else 0.0,
                'avg_detections_per_frame': self.total_detections / max(self.total_frames, 1),
                'avg_preprocess_ms': _average(m.preprocess_ms for m in recent),
                'avg_infer_ms': _average(m.infer_ms for m in recent),
                'avg_postprocess_ms': _average(m.postprocess_ms for m in recent),
                'avg_total_ms': _average(m.total_ms for m in recent),
                'min_total_ms': min((m.total_ms for m in recent), default=0.0),
                'max_total_ms': max((m.total_ms for m in recent), default=0.0),
            }

    def get_recent_frames(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent frames first"""
        with self.lock:
            recent = list(self.frame_history)[-limit:] if self.frame_history else []

            return [
                {
                    'total_ms': metric.total_ms,
                    'infer_ms': metric.infer_ms,
                    'detection_count': metric.detection_count,
                    'timestamp': metric.timestamp
                }
                for metric in reversed(recent)
            ]

    def reset_metrics(self):
        """Reset all metrics"""
        with self.lock:
            self.frame_history.clear()
            self.total_frames = 0
            self.total_detections = 0
            self.start_time = time.time()

            self.logger.info("📊 All metrics reset")


def _average(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


# ================= Prometheus Exporter ================= #

_prometheus_initialized = False
GAUGE_STAGE_MS: Optional[Gauge] = None
GAUGE_FPS: Optional[Gauge] = None
GAUGE_FACES: Optional[Gauge] = None

def setup_prometheus_metrics(app_name: str, port: int = 9090):
    """
    Start the Prometheus metrics exporter.
    Scrape at http://localhost:<port>/metrics.
    """
    global _prometheus_initialized
    global GAUGE_STAGE_MS, GAUGE_FPS, GAUGE_FACES

    if _prometheus_initialized:
        return

    GAUGE_STAGE_MS = Gauge(
        "facecam_stage_duration_ms",
        "Duration of the last frame's pipeline stage in milliseconds",
        ["app", "stage"]
    )
    GAUGE_FPS = Gauge(
        "facecam_average_fps",
        "Average processed frames per second",
        ["app"]
    )
    GAUGE_FACES = Gauge(
        "facecam_faces_detected",
        "Faces detected in the last frame",
        ["app"]
    )

    start_http_server(port)
    logging.getLogger(__name__).info(
        f"📊 Prometheus metrics server started for {app_name} on port {port}"
    )
    _prometheus_initialized = True


def update_prometheus_metrics(app_name: str, timings: FrameTimings, detection_count: int, fps: float):
    """
    Publish the last frame's numbers to the Prometheus gauges
    """
    if not _prometheus_initialized:
        return

    for stage, value in (
        ("preprocess", timings.preprocess_ms),
        ("infer", timings.infer_ms),
        ("postprocess", timings.postprocess_ms),
        ("total", timings.total_ms),
    ):
        GAUGE_STAGE_MS.labels(app=app_name, stage=stage).set(value)
    GAUGE_FPS.labels(app=app_name).set(fps)
    GAUGE_FACES.labels(app=app_name).set(detection_count)
