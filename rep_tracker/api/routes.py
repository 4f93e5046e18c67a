"""
API Routes Module
=================

Flask API routes for the rep tracker server.
"""

import base64
import binascii
import functools
import logging
from typing import Optional

import cv2
import numpy as np
from flask import jsonify, request

from ..tracking import LockTarget
from ..utils import CameraManager, SessionRegistry

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "GET /": "Service index",
    "GET /health": "Health check",
    "POST /process_landmarks": "Process one frame of pose landmarks",
    "POST /process_frame": "Detect pose in a base64 JPEG and process it",
    "POST /lock": "Lock tracking to the current person",
    "POST /unlock": "Return to unlocked tracking",
    "POST /reset": "Reset a session",
    "GET /summary/<session_id>": "Session summary for persistence",
    "POST /session/end": "Return the final summary and release the session",
    "POST /camera/start": "Start server-side camera tracking",
    "POST /camera/stop": "Stop server-side camera tracking",
    "POST /camera/lock": "Lock camera tracking to the person in view",
    "POST /camera/unlock": "Return camera tracking to unlocked mode",
    "GET /camera/status": "Latest camera tracking state",
}


class BadRequest(ValueError):
    """Invalid client payload."""


def _payload() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("JSON object expected")
    return data


def _session_id(data: dict) -> str:
    session_id = data.get("session_id", "default")
    if not isinstance(session_id, str) or not session_id:
        raise BadRequest("Invalid session_id")
    return session_id


def _decode_image(image_data: str) -> np.ndarray:
    """Decode a base64 JPEG/PNG into a BGR frame."""
    if not isinstance(image_data, str) or len(image_data) < 100:
        raise BadRequest("Invalid image data - too small")
    try:
        img_bytes = base64.b64decode(image_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise BadRequest(f"Base64 decode error: {e}")
    if not img_bytes:
        raise BadRequest("Empty image data")

    nparr = np.frombuffer(img_bytes, np.uint8)
    frame = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
    if frame is None or frame.size == 0:
        raise BadRequest("Failed to decode image")
    if frame.shape[0] < 10 or frame.shape[1] < 10:
        raise BadRequest("Image too small")
    return frame


def _handled(view):
    """Translate BadRequest into 400 and unexpected failures into 500."""
    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except BadRequest as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            logger.exception("Error handling %s", request.path)
            return jsonify({"error": str(e)}), 500
    return wrapper


def register_routes(app, registry: SessionRegistry, camera: Optional[CameraManager] = None):
    """
    Register all API routes with the Flask app.

    Args:
        app: Flask application instance
        registry: Session registry for client-driven tracking
        camera: Optional server-side camera manager
    """

    @app.route("/")
    def index():
        """Describe the service endpoints."""
        return jsonify({"service": "rep-tracker", "endpoints": ENDPOINTS})

    @app.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "healthy",
            "sessions": len(registry.ids()),
            "camera_running": camera.is_running() if camera else False,
            "camera_exercise": camera.get_exercise() if camera else None,
        })

    @app.route("/process_landmarks", methods=["POST"])
    @_handled
    def process_landmarks():
        """
        Process one frame of landmarks.

        Request JSON:
            {
                "session_id": "<id>",
                "exercise": "squat" | "pushup" | "lunge",
                "landmarks": [{"x": 0.5, "y": 0.4, "visibility": 0.9}, ...] | null
            }

        Response JSON:
            {"reps", "accuracy", "phase", "feedback", "exercise",
             "person_lost", "locked", "descriptor"}
        """
        data = _payload()
        landmarks = data.get("landmarks")
        if landmarks is not None and not isinstance(landmarks, list):
            raise BadRequest("landmarks must be a list or null")
        with registry.session(_session_id(data), data.get("exercise")) as session:
            return jsonify(session.process_frame(landmarks, data.get("exercise")))

    @app.route("/process_frame", methods=["POST"])
    @_handled
    def process_frame():
        """
        Detect the pose in a camera image and process it.

        Request JSON:
            {
                "session_id": "<id>",
                "exercise": "squat" | "pushup" | "lunge",
                "image": "<base64-encoded-jpeg>"
            }
        """
        data = _payload()
        if "image" not in data:
            raise BadRequest("No image data")
        frame = _decode_image(data["image"])
        return jsonify(registry.detect(_session_id(data), frame, data.get("exercise")))

    @app.route("/lock", methods=["POST"])
    @_handled
    def lock():
        """
        Lock tracking to a person.

        Request JSON:
            {"session_id": "<id>", "descriptor": {"cx", "cy", "size"}}

        The descriptor defaults to the one captured from the latest frame.
        """
        data = _payload()
        descriptor = None
        if data.get("descriptor") is not None:
            try:
                descriptor = LockTarget.from_dict(data["descriptor"])
            except (KeyError, TypeError, ValueError, AttributeError):
                raise BadRequest("Invalid descriptor")
        with registry.session(_session_id(data)) as session:
            if not session.lock(descriptor):
                return jsonify({"error": "No person detected to lock onto"}), 409
            return jsonify({"status": "ok", "target": session.person_lock.target.to_dict()})

    @app.route("/unlock", methods=["POST"])
    @_handled
    def unlock():
        """Return a session to unlocked tracking."""
        with registry.session(_session_id(_payload())) as session:
            session.unlock()
        return jsonify({"status": "ok"})

    @app.route("/reset", methods=["POST"])
    @_handled
    def reset():
        """Reset a session's counters, lock and timer."""
        registry.reset(_session_id(_payload()))
        return jsonify({"status": "ok"})

    @app.route("/summary/<session_id>")
    @_handled
    def summary(session_id):
        """Session summary in the shape the persistence API expects."""
        if not registry.exists(session_id):
            return jsonify({"error": "Unknown session"}), 404
        with registry.session(session_id) as session:
            return jsonify(session.summary())

    @app.route("/session/end", methods=["POST"])
    @_handled
    def end_session():
        """
        End a session: report its final summary and release its state.

        Request JSON:
            {"session_id": "<id>"}
        """
        session = registry.discard(_session_id(_payload()))
        if session is None:
            return jsonify({"error": "Unknown session"}), 404
        return jsonify({"status": "ok", "summary": session.summary()})

    @app.route("/camera/start", methods=["POST"])
    @_handled
    def camera_start():
        """Start server-side camera tracking for an exercise."""
        if camera is None:
            return jsonify({"error": "Camera tracking disabled"}), 503
        exercise = _payload().get("exercise", "squat")
        if not camera.start(exercise):
            return jsonify({"error": "Camera unavailable"}), 503
        return jsonify({"status": "ok", "exercise": exercise})

    @app.route("/camera/stop", methods=["POST"])
    @_handled
    def camera_stop():
        """Stop camera tracking and return the session summary."""
        if camera is None:
            return jsonify({"error": "Camera tracking disabled"}), 503
        return jsonify({"status": "ok", "summary": camera.stop()})

    @app.route("/camera/lock", methods=["POST"])
    @_handled
    def camera_lock():
        """Lock camera tracking to the person in view."""
        if camera is None:
            return jsonify({"error": "Camera tracking disabled"}), 503
        if not camera.lock_person():
            return jsonify({"error": "No person detected to lock onto"}), 409
        return jsonify({"status": "ok"})

    @app.route("/camera/unlock", methods=["POST"])
    @_handled
    def camera_unlock():
        """Return camera tracking to unlocked mode."""
        if camera is None:
            return jsonify({"error": "Camera tracking disabled"}), 503
        camera.unlock_person()
        return jsonify({"status": "ok"})

    @app.route("/camera/status")
    def camera_status():
        """Latest camera tracking state."""
        return jsonify({
            "running": camera.is_running() if camera else False,
            "exercise": camera.get_exercise() if camera else None,
            "state": camera.latest_snapshot() if camera else None,
        })
