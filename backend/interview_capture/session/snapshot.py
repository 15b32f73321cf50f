from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from interview_capture.errors import ErrorInfo


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for operator display."""
    session_id: str
    state: str
    elapsed_seconds: int
    elapsed_display: str
    silence_seconds: int
    word_count: int
    char_count: int
    countdown_hint: Optional[int]
    mic_status: str
    last_error: Optional[ErrorInfo]
    answers_completed: int
    can_proceed: bool
    next_enabled: bool

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "state": self.state,
            "elapsed_seconds": self.elapsed_seconds,
            "elapsed_display": self.elapsed_display,
            "silence_seconds": self.silence_seconds,
            "word_count": self.word_count,
            "char_count": self.char_count,
            "countdown_hint": self.countdown_hint,
            "mic_status": self.mic_status,
            "last_error": self.last_error.to_dict() if self.last_error else None,
            "answers_completed": self.answers_completed,
            "can_proceed": self.can_proceed,
            "next_enabled": self.next_enabled,
        }
