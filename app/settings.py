# app/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import validator
from typing import Optional, Tuple, Union
from pathlib import Path

from core.enums import PreprocessMode, LogFormat, LogLevel

# =============================================================================
# Face Detection Config (nested)
# =============================================================================
class FaceDetectionConfig(BaseSettings):
    """Configuration for the face detector"""

    # Model Settings
    detector_model: str = "face-detection-0200"  # see ModelConfigs; decides the backend
    models_path: Path = Path("./models")
    device: str = "CPU"  # OpenVINO: CPU, GPU, AUTO / OpenCV DNN: cpu, cuda
    confidence_threshold: float = 0.5
    preprocess_mode: PreprocessMode = PreprocessMode.MODEL

    # Download
    download_timeout: int = 600
    download_retries: int = 3

    # Validators
    @validator('confidence_threshold')
    def validate_threshold(cls, v):
        if not 0.0 <= v <= 1.0:
            raise ValueError("Threshold must be between 0.0 and 1.0")
        return v

    @validator('download_timeout', 'download_retries')
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("Value must be a positive integer")
        return v

    # -------------------------------------------------------------------------
    # Pydantic Settings Config
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_prefix="FACE_DETECTION__",   # map .env variables like FACE_DETECTION__DEVICE
        extra="ignore"
    )


# =============================================================================
# Main Application Settings
# =============================================================================
class Settings(BaseSettings):
    """Application settings with validation"""

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = "FaceCam.OpenVINODemo"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: LogLevel = LogLevel.INFO

    # -------------------------------------------------------------------------
    # Video Source & Display
    # -------------------------------------------------------------------------
    camera_source: str = "0"  # camera index or file / stream URL
    camera_buffer_size: int = 1
    window_name: str = "frame"
    show_window: bool = True
    quit_key: str = "q"
    overlay_color: Tuple[int, int, int] = (0, 0, 255)  # BGR red
    max_frames: Optional[int] = None

    # -------------------------------------------------------------------------
    # Monitoring & Logging
    # -------------------------------------------------------------------------
    prometheus_port: int = 9090
    enable_metrics: bool = False
    stats_log_interval: int = 30

    log_format: LogFormat = LogFormat.CONSOLE
    log_file_path: Path = Path("./data/logs/facecam-demo.log")
    log_max_size: str = "10MB"
    log_backup_count: int = 3

    # -------------------------------------------------------------------------
    # Nested Face Detection Config
    # -------------------------------------------------------------------------
    face_detection: FaceDetectionConfig = FaceDetectionConfig()

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def video_source(self) -> Union[int, str]:
        """Camera index when camera_source is numeric, otherwise path/URL"""
        source = self.camera_source.strip()
        return int(source) if source.isdigit() else source

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.value.upper()

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @validator('log_level', 'log_format', pre=True)
    def normalize_enum_case(cls, v):
        return v.lower() if isinstance(v, str) else v

    @validator('prometheus_port')
    def validate_port(cls, v):
        if not 0 < v < 65536:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @validator('quit_key')
    def validate_quit_key(cls, v):
        if len(v) != 1:
            raise ValueError("Quit key must be a single character")
        return v

    @validator('max_frames')
    def validate_max_frames(cls, v):
        if v is not None and v < 1:
            raise ValueError("max_frames must be positive when set")
        return v

    # -------------------------------------------------------------------------
    # Pydantic Settings Config
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
