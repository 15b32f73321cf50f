from __future__ import annotations

from dataclasses import dataclass
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger("session.callbacks")


@dataclass
class SessionCallbacks:
    """
    Host-facing contract. Each hook may be a plain function or a coroutine
    function; missing hooks are skipped.
    """
    on_start: Optional[Callable[[], Any]] = None
    on_stop: Optional[Callable[[], Any]] = None
    on_transcript_update: Optional[Callable[[str], Any]] = None
    on_answer_complete: Optional[Callable[[str], Any]] = None
    on_error: Optional[Callable[[Any], Any]] = None
    on_tick: Optional[Callable[[Any], Any]] = None

    async def emit(self, name: str, *args) -> None:
        fn = getattr(self, name, None)
        if fn is None:
            return
        try:
            result = fn(*args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Host callback %s failed", name)
