import asyncio
from enum import Enum
import time
import uuid
import logging

logger = logging.getLogger("turn")


class AnswerState(Enum):
    OPEN = "open"
    FINALIZING = "finalizing"
    FINALIZED = "finalized"


class AnswerTurn:
    """
    One answer's close-out guard. try_finalize() wins exactly once,
    no matter how many ticks or manual requests race for it.
    """

    def __init__(self, index: int):
        self.turn_id = str(uuid.uuid4())
        self.index = index
        self.state = AnswerState.OPEN
        self.lock = asyncio.Lock()
        self.opened_at = time.monotonic()
        self.finalized_at = None
        self.reason = None

    @property
    def is_open(self) -> bool:
        return self.state is AnswerState.OPEN

    async def try_finalize(self, reason: str) -> bool:
        async with self.lock:
            if self.state is not AnswerState.OPEN:
                logger.info(f"[ANSWER {self.index}] Finalize skipped (already {self.state.value}) | reason={reason}")
                return False

            logger.info(f"[ANSWER {self.index}] Transition OPEN → FINALIZING | reason={reason}")
            self.state = AnswerState.FINALIZING
            self.reason = reason
            return True

    async def mark_finalized(self):
        async with self.lock:
            self.state = AnswerState.FINALIZED
            self.finalized_at = time.monotonic()
            logger.info(f"[ANSWER {self.index}] FINALIZED | duration={self.finalized_at - self.opened_at:.2f}s")
