"""
Server Configuration
====================

Configuration settings for the rep tracker server.
"""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class ServerConfig:
    """Server configuration settings."""
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    threaded: bool = True
    log_level: str = "INFO"


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: Optional[int] = None  # None for auto-detect
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class TrackerConfig:
    """Tracking configuration settings."""
    default_exercise: str = "squat"
    lock_radius: float = 0.35
    voice_enabled: bool = False
    voice_repeat_interval: float = 3.0
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def get_server_config() -> ServerConfig:
    """Get server configuration from environment."""
    return ServerConfig(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        debug=_env_flag("DEBUG"),
        threaded=True,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def get_camera_config() -> CameraConfig:
    """Get camera configuration from environment."""
    index = os.getenv("CAMERA_INDEX")
    return CameraConfig(
        index=int(index) if index else None,
        width=int(os.getenv("CAMERA_WIDTH", "640")),
        height=int(os.getenv("CAMERA_HEIGHT", "480")),
        fps=int(os.getenv("CAMERA_FPS", "30"))
    )


def get_tracker_config() -> TrackerConfig:
    """Get tracking configuration from environment."""
    return TrackerConfig(
        default_exercise=os.getenv("DEFAULT_EXERCISE", "squat"),
        lock_radius=float(os.getenv("LOCK_RADIUS", "0.35")),
        voice_enabled=_env_flag("VOICE_ENABLED"),
        voice_repeat_interval=float(os.getenv("VOICE_REPEAT_INTERVAL", "3.0")),
        min_detection_confidence=float(os.getenv("MIN_DETECTION_CONFIDENCE", "0.5")),
        min_tracking_confidence=float(os.getenv("MIN_TRACKING_CONFIDENCE", "0.5")),
    )
