"""
Voice capture on top of a platform speech recognizer.

Two states, IDLE and LISTENING. Finalized transcript segments are appended to
the document text; a silence watchdog stops listening after a quiet spell.
The recognizer and its watchdog live in a single slot and are torn down
together on every way out of LISTENING.
"""
import enum
import logging
import threading
from typing import Any, Callable, NamedTuple, Optional, Sequence

from handwriting.models import DocumentText
from handwriting.notifications import Notifier

logger = logging.getLogger(__name__)

SILENCE_TIMEOUT = 2.0


class VoiceState(enum.Enum):
    IDLE = "idle"
    LISTENING = "listening"


class RecognitionResult(NamedTuple):
    transcript: str
    is_final: bool


# factory(lang=..., continuous=..., interim_results=..., on_result=..., on_error=..., on_end=...)
# returns an object with start() and stop(), or None when speech recognition is unavailable.
RecognizerFactory = Callable[..., Any]


class _ActiveCapture:
    def __init__(self, recognizer: Any):
        self.recognizer = recognizer
        self.timer: Any = None


class VoiceCapture:
    def __init__(self, text: DocumentText, notifier: Optional[Notifier] = None,
                 recognizer_factory: Optional[RecognizerFactory] = None,
                 timer_factory: Callable[..., Any] = threading.Timer,
                 silence_timeout: float = SILENCE_TIMEOUT, lang: str = "en-US"):
        self.text = text
        self.notifier = notifier or Notifier()
        self.recognizer_factory = recognizer_factory
        self.timer_factory = timer_factory
        self.silence_timeout = silence_timeout
        self.lang = lang
        self.interim = ""
        self.available = recognizer_factory is not None
        self._unavailable_reported = False
        self._active: Optional[_ActiveCapture] = None
        self._lock = threading.RLock()

    @property
    def state(self) -> VoiceState:
        return VoiceState.LISTENING if self._active is not None else VoiceState.IDLE

    @property
    def listening(self) -> bool:
        return self._active is not None

    def toggle(self) -> VoiceState:
        if self.listening:
            self.stop()
        else:
            self.start()
        return self.state

    def start(self) -> bool:
        if not self.available:
            self._report_unavailable()
            return False
        with self._lock:
            if self._active is not None:
                return True

            capture = _ActiveCapture(None)
            recognizer = self.recognizer_factory(
                lang=self.lang,
                continuous=True,
                interim_results=True,
                on_result=lambda results: self._on_result(capture, results),
                on_error=lambda error: self._on_error(capture, error),
                on_end=lambda: self._on_end(capture),
            )
            if recognizer is None:
                self.available = False
                self._report_unavailable()
                return False

            capture.recognizer = recognizer
            self._active = capture
            try:
                recognizer.start()
            except Exception as e:
                logger.exception("Speech recognizer failed to start")
                self._finish(capture, error=str(e) or type(e).__name__)
                return False
            self._arm_watchdog(capture)

        self.notifier.success("Listening... Speak now!")
        return True

    def stop(self) -> None:
        """Explicit stop by the user."""
        capture = self._active
        if capture is not None:
            self._finish(capture)

    # ----- recognizer callbacks -----

    def _on_result(self, capture: _ActiveCapture, results: Sequence[RecognitionResult]) -> None:
        with self._lock:
            if self._active is not capture:
                return
            self._arm_watchdog(capture)
            interim = ""
            for result in results:
                if result.is_final:
                    self.text.append(result.transcript + " ")
                else:
                    interim += result.transcript
            self.interim = interim

    def _on_error(self, capture: _ActiveCapture, error: str) -> None:
        logger.error("Speech recognition error: %s", error)
        self._finish(capture, error=error)

    def _on_end(self, capture: _ActiveCapture) -> None:
        self._finish(capture)

    def _on_silence(self, capture: _ActiveCapture) -> None:
        logger.info("No speech for %.1fs, stopping voice input", self.silence_timeout)
        self._finish(capture)

    # ----- internals -----

    def _arm_watchdog(self, capture: _ActiveCapture) -> None:
        if capture.timer is not None:
            capture.timer.cancel()
        timer = self.timer_factory(self.silence_timeout, lambda: self._on_silence(capture))
        timer.daemon = True
        capture.timer = timer
        timer.start()

    def _finish(self, capture: _ActiveCapture, error: Optional[str] = None) -> None:
        with self._lock:
            if self._active is not capture:
                return
            self._active = None
            self.interim = ""

        if capture.timer is not None:
            capture.timer.cancel()
        try:
            capture.recognizer.stop()
        except Exception:
            logger.exception("Speech recognizer failed to stop")

        if error:
            self.notifier.error(f"Voice input error: {error}")
        else:
            self.notifier.success("Voice input stopped")

    def _report_unavailable(self) -> None:
        if self._unavailable_reported:
            return
        self._unavailable_reported = True
        self.notifier.error("Voice input is not supported on this device")
