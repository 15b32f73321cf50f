from interview_capture.session.callbacks import SessionCallbacks
from interview_capture.session.controller import InterviewCaptureSession, SessionTiming
from interview_capture.session.registry import SessionRegistry, session_registry
from interview_capture.session.snapshot import SessionSnapshot

__all__ = [
    "InterviewCaptureSession",
    "SessionCallbacks",
    "SessionRegistry",
    "SessionSnapshot",
    "SessionTiming",
    "session_registry",
]
