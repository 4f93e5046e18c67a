"""
Rep Tracker Server
==================

Main entry point for the Flask server.

Usage:
    python run.py

Or with gunicorn:
    gunicorn -w 1 -b 0.0.0.0:5000 "run:create_app()"
"""

import logging
import os
import sys

# Add server source to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from flask import Flask

from config import get_camera_config, get_server_config, get_tracker_config
from rep_tracker.api import register_routes
from rep_tracker.utils import CameraManager, PoseEstimator, SessionRegistry, VoiceAssistant, open_camera

logger = logging.getLogger("rep_tracker")


def create_app(enable_camera: bool = True) -> Flask:
    """
    Create the Flask app with its session registry and camera manager.

    Args:
        enable_camera: Register a server-side camera manager
    """
    tracker_config = get_tracker_config()
    camera_config = get_camera_config()

    app = Flask(__name__)
    app.config["JSON_SORT_KEYS"] = False

    def estimator_factory():
        return PoseEstimator(
            min_detection_confidence=tracker_config.min_detection_confidence,
            min_tracking_confidence=tracker_config.min_tracking_confidence,
        )

    registry = SessionRegistry(
        tracker_config.default_exercise, tracker_config.lock_radius, estimator_factory
    )

    camera = None
    if enable_camera:
        voice = None
        if tracker_config.voice_enabled:
            voice = VoiceAssistant(tracker_config.voice_repeat_interval)
        camera = CameraManager(
            capture_factory=lambda: open_camera(
                camera_config.index, camera_config.width, camera_config.height, camera_config.fps
            ),
            estimator_factory=estimator_factory,
            voice=voice,
            lock_radius=tracker_config.lock_radius,
        )

    register_routes(app, registry, camera)
    return app


def main():
    """Main entry point."""
    config = get_server_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    logger.info("Rep tracker server running at http://%s:%d (debug=%s)", config.host, config.port, config.debug)
    app.run(host=config.host, port=config.port, debug=config.debug, threaded=config.threaded)


if __name__ == "__main__":
    main()
