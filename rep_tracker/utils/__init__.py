"""
Utilities Module
================

Frame sources, session registry and voice output around the tracking core.
"""

from .camera_manager import CameraManager, open_camera
from .frame_processor import SessionRegistry
from .pose_source import PoseEstimator, results_to_landmarks
from .voice_assistant import VoiceAssistant

__all__ = [
    "CameraManager",
    "open_camera",
    "SessionRegistry",
    "PoseEstimator",
    "results_to_landmarks",
    "VoiceAssistant",
]
