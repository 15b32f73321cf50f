import asyncio
import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from interview_capture.capture.base import CaptureHandle, CaptureResourceManager  # noqa: E402
from interview_capture.errors import ErrorInfo  # noqa: E402
from interview_capture.session.callbacks import SessionCallbacks  # noqa: E402
from interview_capture.session.controller import SessionTiming  # noqa: E402
from interview_capture.transcription.base import TranscriptionAdapter  # noqa: E402


# 19 words, 100 characters: clears every auto-advance threshold
LONG_ANSWER = "I led the migration of our billing service to an event driven design and cut latency in half overall"
SHORT_ANSWER = "Yes I think so"


class FakeTranscriptionAdapter(TranscriptionAdapter):
    def __init__(self, supported: bool = True):
        super().__init__()
        self.supported = supported
        self.start_calls = 0
        self.stop_calls = 0
        self.reset_calls = 0

    @property
    def is_supported(self) -> bool:
        return self.supported

    async def start(self) -> None:
        self.start_calls += 1
        await self._set_listening(True)

    async def stop(self) -> None:
        self.stop_calls += 1
        await self._set_listening(False)

    async def reset(self) -> None:
        self.reset_calls += 1
        await super().reset()

    async def speak(self, text: str) -> None:
        await self._set_text(text)

    async def fail(self, code: str, message: str = "") -> None:
        await self._set_error(ErrorInfo(code=code, message=message))

    async def drop_listening(self) -> None:
        await self._set_listening(False)


class FakeCaptureManager(CaptureResourceManager):
    def __init__(self, error: Exception | None = None, gate: asyncio.Event | None = None):
        super().__init__()
        self.error = error
        self.gate = gate
        self.opened: list[CaptureHandle] = []
        self.closed: list[CaptureHandle] = []

    async def _open(self) -> CaptureHandle:
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        handle = CaptureHandle()
        self.opened.append(handle)
        return handle

    async def _close(self, handle: CaptureHandle) -> None:
        self.closed.append(handle)


class CallbackRecorder:
    def __init__(self):
        self.events: list[tuple] = []

    def callbacks(self) -> SessionCallbacks:
        return SessionCallbacks(
            on_start=lambda: self.events.append(("start",)),
            on_stop=lambda: self.events.append(("stop",)),
            on_transcript_update=lambda text: self.events.append(("transcript", text)),
            on_answer_complete=lambda text: self.events.append(("answer_complete", text)),
            on_error=lambda info: self.events.append(("error", info)),
            on_tick=lambda snapshot: self.events.append(("tick", snapshot)),
        )

    def of(self, name: str) -> list[tuple]:
        return [event for event in self.events if event[0] == name]


@pytest.fixture
def adapter() -> FakeTranscriptionAdapter:
    return FakeTranscriptionAdapter()


@pytest.fixture
def capture() -> FakeCaptureManager:
    return FakeCaptureManager()


@pytest.fixture
def recorder() -> CallbackRecorder:
    return CallbackRecorder()


@pytest.fixture
def manual_timing() -> SessionTiming:
    # timers never fire on their own; tests drive the tick handlers
    return SessionTiming(tick_interval_sec=3600, listen_start_delay_sec=0, settle_delay_sec=0.01)
