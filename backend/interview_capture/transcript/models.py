from dataclasses import dataclass, field
import time
import uuid


@dataclass
class AnswerRecord:
    """
    One closed-out answer, as handed to the host.
    """
    answer_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    index: int = 0  # 1-based within the session
    text: str = ""
    word_count: int = 0
    reason: str = "auto_advance"  # auto_advance | manual

    elapsed_seconds: int = 0
    silence_seconds: int = 0
    finalized_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "answer_id": self.answer_id,
            "index": self.index,
            "text": self.text,
            "word_count": self.word_count,
            "reason": self.reason,
            "elapsed_seconds": self.elapsed_seconds,
            "silence_seconds": self.silence_seconds,
            "finalized_at": self.finalized_at,
        }
