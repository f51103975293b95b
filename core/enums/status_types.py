"""
Status types enumeration for the FaceCam demo.
"""

from enum import Enum


class LogFormat(str, Enum):
    """Log renderers supported by configure_logging"""
    JSON = "json"
    CONSOLE = "console"


class LogLevel(str, Enum):
    """Logging levels"""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
