"""
Configuration Module
====================
"""

from .settings import (
    ServerConfig,
    CameraConfig,
    TrackerConfig,
    get_server_config,
    get_camera_config,
    get_tracker_config,
)

__all__ = [
    "ServerConfig",
    "CameraConfig",
    "TrackerConfig",
    "get_server_config",
    "get_camera_config",
    "get_tracker_config",
]
