"""
Voice Assistant Module
======================

Spoken coaching feedback using pyttsx3 on a worker thread.
"""

import logging
import queue
import threading
import time
from typing import Optional

import pyttsx3

logger = logging.getLogger(__name__)


class VoiceAssistant:
    """
    Queue-backed text-to-speech.

    Non-priority messages identical to the last one spoken are dropped
    within the repeat interval. Priority messages always go through and
    discard anything still pending.

    Attributes:
        repeat_interval (float): Seconds before the same message may repeat
    """

    def __init__(self, repeat_interval: float = 3.0, start_worker: bool = True, clock=time.monotonic):
        """
        Initialize the assistant.

        Args:
            repeat_interval: Throttle window for repeated messages
            start_worker: Start the speech thread, disable for silent use
            clock: Time source in seconds
        """
        self.repeat_interval = repeat_interval
        self.speech_queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._clock = clock
        self._last_text: Optional[str] = None
        self._last_time = float("-inf")
        self.speech_thread: Optional[threading.Thread] = None
        if start_worker:
            self.speech_thread = threading.Thread(target=self._speech_worker, daemon=True)
            self.speech_thread.start()

    def speak(self, text: str, priority: bool = False) -> bool:
        """
        Queue text for speech output.

        Returns:
            True if the text was queued, False if throttled or empty
        """
        if not text:
            return False
        now = self._clock()
        if (
            not priority
            and text == self._last_text
            and now - self._last_time < self.repeat_interval
        ):
            return False
        if priority:
            self._drain()
        self._last_text = text
        self._last_time = now
        self.speech_queue.put(text)
        return True

    def _drain(self) -> None:
        while True:
            try:
                self.speech_queue.get_nowait()
            except queue.Empty:
                return

    def close(self) -> None:
        """Stop the speech worker."""
        self.speech_queue.put(None)
        if self.speech_thread:
            self.speech_thread.join(timeout=2.0)

    def _speech_worker(self) -> None:
        """Worker thread for text-to-speech."""
        try:
            engine = pyttsx3.init()
        except Exception:
            logger.warning("Text-to-speech unavailable, voice feedback disabled")
            engine = None

        while True:
            payload = self.speech_queue.get()
            if payload is None:
                break
            if engine:
                try:
                    engine.say(payload)
                    engine.runAndWait()
                except Exception:
                    logger.exception("Speech output failed")

        if engine:
            try:
                engine.stop()
            except Exception:
                logger.debug("Speech engine stop failed", exc_info=True)
