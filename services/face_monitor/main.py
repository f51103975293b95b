# services/face_monitor/main.py
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from app.settings import Settings, settings
from core.exceptions import CameraError, FaceCamException
from core.models import DetectionOutput
from infrastructure.monitoring.metrics import FrameMetrics, setup_prometheus_metrics, update_prometheus_metrics
from services.face_monitor.camera import VideoSource
from services.face_monitor.detectors import BaseDetector, create_detector
from services.face_monitor.model_downloader import ModelDownloader
from services.face_monitor.renderer import FrameRenderer
from shared.config.logging_config import configure_logging
from shared.config.model_configs import ModelConfigs


class FaceMonitorService:
    """Live face detection: capture -> preprocess -> infer -> postprocess -> render"""

    def __init__(self,
                 config: Settings = settings,
                 video_source: Optional[VideoSource] = None,
                 detector: Optional[BaseDetector] = None,
                 renderer: Optional[FrameRenderer] = None,
                 downloader: Optional[ModelDownloader] = None):
        self.config = config
        self.detection_config = config.face_detection
        self.model_config = ModelConfigs.get(self.detection_config.detector_model)
        self.logger = logging.getLogger(__name__)

        # Components; anything not injected is built in start()
        self.video_source = video_source
        self.detector = detector
        self.renderer = renderer or FrameRenderer(
            window_name=config.window_name,
            color=config.overlay_color,
            show_window=config.show_window,
            quit_key=config.quit_key
        )
        self.downloader = downloader or ModelDownloader(
            self.detection_config.models_path,
            timeout=self.detection_config.download_timeout,
            max_attempts=self.detection_config.download_retries
        )
        self.metrics = FrameMetrics()

        # Service state
        self.is_running = False
        self._stop_requested = False
        self.processed_frames = 0
        self._last_stats_log = 0.0
        self._previous_handlers: Dict[int, Any] = {}

    def start(self) -> int:
        """Prepare all components and run the frame loop. Returns processed frame count."""
        self.logger.info(f"🚀 Starting {self.config.app_name} v{self.config.app_version}")
        try:
            self._setup_signal_handlers()
            model_path = self._ensure_model()
            self._open_video_source()
            self._prepare_detector(model_path)

            if self.config.enable_metrics:
                setup_prometheus_metrics(self.config.app_name, self.config.prometheus_port)

            return self.run()
        finally:
            self.shutdown()

    def run(self) -> int:
        """Synchronous frame loop"""
        if self._stop_requested:
            self.logger.info("🛑 Stop requested before the frame loop started")
            return self.processed_frames

        self.is_running = True
        self.metrics.reset_metrics()
        self._last_stats_log = time.time()

        while self.is_running:
            frame = self.video_source.read_frame()
            if frame is None:
                self.logger.info("🎞️ Video source has no more frames")
                break

            _, keep_going = self.process_frame(frame)
            if not keep_going:
                break
            if self.config.max_frames is not None and self.processed_frames >= self.config.max_frames:
                self.logger.info(f"🏁 Reached max_frames={self.config.max_frames}")
                break

        self.is_running = False
        self._log_stats()
        return self.processed_frames

    def process_frame(self, frame: np.ndarray):
        """Detect, record and render one frame. Returns (output, keep_going)."""
        output: DetectionOutput = self.detector.detect(frame)
        self.processed_frames += 1

        timings = output.timings
        self.logger.debug(f"totalTime={timings.total_ms:.2f}ms faces={output.detection_count}")

        self.metrics.record_frame(timings, output.detection_count)
        if self.config.enable_metrics:
            stats = self.metrics.get_overall_stats()
            update_prometheus_metrics(self.config.app_name, timings, output.detection_count, stats['avg_fps'])

        now = time.time()
        if now - self._last_stats_log >= self.config.stats_log_interval:
            self._log_stats()
            self._last_stats_log = now

        keep_going = self.renderer.render(frame, output)
        return output, keep_going

    def stop(self):
        """Ask the frame loop to finish after the current frame"""
        self._stop_requested = True
        self.is_running = False

    def shutdown(self):
        """Release camera, detector and windows"""
        self.is_running = False
        if self.video_source is not None:
            self.video_source.close()
        if self.detector is not None and self.detector.is_loaded:
            self.detector.unload_model()
        self.renderer.close()
        self._restore_signal_handlers()
        self.logger.info(f"✅ {self.config.app_name} shutdown completed")

    def get_status(self) -> Dict[str, Any]:
        """Current service status"""
        return {
            'is_running': self.is_running,
            'processed_frames': self.processed_frames,
            'model': self.model_config.name,
            'backend': self.model_config.backend.value,
            'performance': self.metrics.get_overall_stats(),
            'detector': self.detector.get_statistics() if self.detector else None
        }

    def _open_video_source(self):
        if self.video_source is None:
            self.video_source = VideoSource(self.config.video_source, self.config.camera_buffer_size)
        if not self.video_source.is_opened and not self.video_source.open():
            raise CameraError(f"Cannot open video source: {self.video_source.source}")

    def _ensure_model(self) -> Optional[Path]:
        """Fetch the model files before the camera is held open"""
        if self.detector is not None:
            return None
        return self.downloader.ensure_model_sync(self.model_config)

    def _prepare_detector(self, model_path: Optional[Path]):
        if self.detector is None:
            self.detector = create_detector(
                self.model_config,
                model_path,
                device=self.detection_config.device,
                confidence_threshold=self.detection_config.confidence_threshold,
                preprocess_mode=self.detection_config.preprocess_mode
            )
        if not self.detector.is_loaded:
            self.detector.load_model(frame_size=self.video_source.frame_size)

    def _restore_signal_handlers(self):
        for sig, handler in self._previous_handlers.items():
            if handler is not None:
                signal.signal(sig, handler)
        self._previous_handlers.clear()

    def _log_stats(self):
        stats = self.metrics.get_overall_stats()
        if stats['total_frames'] == 0:
            return
        self.logger.info(
            f"📊 Performance: {stats['avg_fps']:.1f} FPS | "
            f"Frames: {stats['total_frames']} | "
            f"Avg total: {stats['avg_total_ms']:.2f}ms "
            f"(pre {stats['avg_preprocess_ms']:.2f} / infer {stats['avg_infer_ms']:.2f} / "
            f"post {stats['avg_postprocess_ms']:.2f}) | "
            f"Faces/frame: {stats['avg_detections_per_frame']:.2f}"
        )

    def _setup_signal_handlers(self):
        """Setup graceful shutdown signal handlers"""
        def signal_handler(signum, _frame):
            self.logger.info(f"Received signal {signum}, initiating shutdown...")
            self.stop()

        try:
            for sig in (signal.SIGTERM, signal.SIGINT):
                self._previous_handlers[sig] = signal.signal(sig, signal_handler)
        except ValueError as e:
            # signal.signal only works in the main thread
            self.logger.warning(f"⚠️ Could not setup signal handlers: {e}")


def main() -> int:
    """Main entry point"""
    configure_logging(
        log_level=settings.effective_log_level,
        log_format=settings.log_format,
        log_file_path=settings.log_file_path,
        log_max_size=settings.log_max_size,
        log_backup_count=settings.log_backup_count
    )
    logger = logging.getLogger("face_monitor_main")

    try:
        service = FaceMonitorService(settings)
        frames = service.start()
        logger.info(f"🏁 Processed {frames} frames")
        return 0
    except KeyboardInterrupt:
        logger.info("👋 Received KeyboardInterrupt")
        return 0
    except FaceCamException as e:
        logger.error(f"❌ {type(e).__name__}: {e}")
        return 1
    except Exception as e:
        logger.error(f"💥 Unhandled error in main: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
