from __future__ import annotations

import logging
from typing import Awaitable, Callable

from interview_capture.errors import ErrorInfo
from interview_capture.transcription.base import TranscriptionAdapter

logger = logging.getLogger("transcription.remote")

SendFn = Callable[[dict], Awaitable[None]]


class RemoteTranscriptionAdapter(TranscriptionAdapter):
    """
    Recognition running in the operator's browser.

    Control goes out as listen_start / listen_stop, results come back as
    transcript, listening and stt_error messages. Results that arrive
    while no listen is requested are stale and dropped.
    """

    def __init__(self, send_fn: SendFn, speech_supported: bool = False):
        super().__init__()
        self._send_fn = send_fn
        self._supported = bool(speech_supported)
        self._requested = False

    @property
    def is_supported(self) -> bool:
        return self._supported

    def set_supported(self, value: bool) -> None:
        self._supported = bool(value)

    async def start(self) -> None:
        if self._requested:
            return
        self._requested = True
        await self._send_fn({"type": "listen_start"})

    async def stop(self) -> None:
        if not self._requested and not self._is_listening:
            return
        self._requested = False
        await self._send_fn({"type": "listen_stop"})
        await self._set_listening(False)

    async def on_transcript(self, text: str) -> None:
        if not self._requested:
            logger.info("Dropping transcript received while not listening | length=%s", len(text or ""))
            return
        await self._set_text(text)

    async def on_listening(self, value: bool) -> None:
        if value and not self._requested:
            return
        await self._set_listening(value)

    async def on_error(self, code: str, message: str = "") -> None:
        await self._set_error(ErrorInfo(code=str(code or "stt_error"), message=str(message or "")))
