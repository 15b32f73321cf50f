from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from interview_capture.errors import ErrorInfo

logger = logging.getLogger("transcription")


@dataclass(frozen=True)
class TranscriptionEvent:
    kind: str  # transcript | listening | error
    text: str = ""
    is_listening: bool = False
    error: Optional[ErrorInfo] = None


Listener = Callable[[TranscriptionEvent], Union[None, Awaitable[None]]]


class TranscriptionAdapter(ABC):
    """
    Streaming speech-to-text capability.

    Exposes a current value (text, is_listening, last_error) plus a
    change event stream through subscribe(). start() and stop() are
    idempotent and their effect may arrive later as a listening event.
    """

    def __init__(self):
        self._listeners: list[Listener] = []
        self._text: str = ""
        self._is_listening: bool = False
        self._last_error: Optional[ErrorInfo] = None

    @property
    @abstractmethod
    def is_supported(self) -> bool:
        ...

    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...

    @property
    def text(self) -> str:
        return self._text

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    @property
    def last_error(self) -> Optional[ErrorInfo]:
        return self._last_error

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def reset(self) -> None:
        """Clear accumulated text."""
        await self._set_text("")

    async def _set_text(self, text: str) -> None:
        text = str(text or "")
        if text == self._text:
            return
        self._text = text
        await self._publish(TranscriptionEvent(kind="transcript", text=text, is_listening=self._is_listening))

    async def _set_listening(self, value: bool) -> None:
        value = bool(value)
        if value == self._is_listening:
            return
        self._is_listening = value
        if value:
            self._last_error = None
        await self._publish(TranscriptionEvent(kind="listening", text=self._text, is_listening=value))

    async def _set_error(self, info: ErrorInfo) -> None:
        self._last_error = info
        await self._publish(TranscriptionEvent(kind="error", text=self._text, is_listening=self._is_listening, error=info))

    async def _publish(self, event: TranscriptionEvent) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Transcription listener failed | kind=%s", event.kind)
