from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Optional
import uuid

from core.logger import log_event
from core.state import MicStatus, SessionState
from interview_capture.capture.base import CaptureHandle, CaptureResourceManager
from interview_capture.decision import AdvanceThresholds, AutoAdvanceDecisionEngine
from interview_capture.errors import AdapterError, CapabilityUnsupported, CaptureSessionError, ErrorInfo
from interview_capture.session.callbacks import SessionCallbacks
from interview_capture.session.snapshot import SessionSnapshot
from interview_capture.system_metrics import decrement_metric, increment_metric, record_start_failure
from interview_capture.timing import TickTimer, format_elapsed
from interview_capture.transcript import AnswerRecord, TranscriptAccumulator
from interview_capture.transcript import rules
from interview_capture.transcription.base import TranscriptionAdapter, TranscriptionEvent
from interview_capture.turn_lifecycle import AnswerTurn

logging.basicConfig(
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger("session_controller")


@dataclass(frozen=True)
class SessionTiming:
    tick_interval_sec: float = rules.TICK_INTERVAL_SEC
    listen_start_delay_sec: float = rules.LISTEN_START_DELAY_SEC
    settle_delay_sec: float = rules.SETTLE_DELAY_SEC


class InterviewCaptureSession:
    """
    Owns one interview capture run: idle → active → stopped.

    While active it holds the capture handle, keeps the transcription
    adapter listening, runs the elapsed and silence timers, and closes
    out each answer when the auto-advance rules (or the operator) say so.
    A stopped session is spent; the host creates a new one to go again.

    Everything runs on one event loop. Handlers re-check `state` after
    every await, so a stop() landing mid-acquire, mid-finalize or during
    the settling delay leaves no trailing side effects.
    """

    def __init__(
        self,
        adapter: TranscriptionAdapter,
        capture: CaptureResourceManager,
        callbacks: SessionCallbacks | None = None,
        thresholds: AdvanceThresholds | None = None,
        timing: SessionTiming | None = None,
        session_id: str | None = None,
        can_proceed: bool = True,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.state = SessionState.IDLE
        self.can_proceed = bool(can_proceed)
        self.answers: list[AnswerRecord] = []
        self.elapsed_seconds = 0
        self.silence_seconds = 0
        self.last_error: Optional[ErrorInfo] = None

        self._adapter = adapter
        self._capture = capture
        self._callbacks = callbacks or SessionCallbacks()
        self._engine = AutoAdvanceDecisionEngine(thresholds)
        self._timing = timing or SessionTiming()
        self._accumulator = TranscriptAccumulator()
        self._handle: CaptureHandle | None = None
        self._turn = AnswerTurn(index=1)
        self._unsubscribe = None
        self._starting = False
        self._tasks: list[asyncio.Task] = []
        self._elapsed_timer = TickTimer("elapsed", self._timing.tick_interval_sec, self.on_elapsed_tick)
        self._silence_timer = TickTimer("silence", self._timing.tick_interval_sec, self.on_silence_tick)

    # -------------------------
    # READ SIDE
    # -------------------------

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def starting(self) -> bool:
        """True while capture acquisition is in flight."""
        return self._starting

    @property
    def handle(self) -> CaptureHandle | None:
        return self._handle

    @property
    def transcript(self) -> str:
        return self._accumulator.text

    @property
    def word_count(self) -> int:
        return self._accumulator.word_count

    @property
    def transcript_watermark(self) -> int:
        return self._accumulator.last_observed_length

    @property
    def timers_running(self) -> bool:
        return self._elapsed_timer.running or self._silence_timer.running

    def countdown_hint(self) -> Optional[int]:
        if not self.is_active or self._accumulator.is_empty:
            return None
        return self._engine.countdown_hint(self.silence_seconds)

    def mic_status(self) -> MicStatus:
        if not self._adapter.is_supported:
            return MicStatus.UNSUPPORTED
        if self._adapter.last_error is not None:
            return MicStatus.ERROR
        if self.is_active and self._adapter.is_listening:
            return MicStatus.RECORDING
        return MicStatus.OFF

    def snapshot(self) -> SessionSnapshot:
        has_text = not self._accumulator.is_empty
        return SessionSnapshot(
            session_id=self.session_id,
            state=self.state.value,
            elapsed_seconds=self.elapsed_seconds,
            elapsed_display=format_elapsed(self.elapsed_seconds),
            silence_seconds=self.silence_seconds,
            word_count=self._accumulator.word_count,
            char_count=self._accumulator.char_count,
            countdown_hint=self.countdown_hint(),
            mic_status=self.mic_status().value,
            last_error=self._adapter.last_error,
            answers_completed=len(self.answers),
            can_proceed=self.can_proceed,
            next_enabled=self.is_active and has_text and self.can_proceed,
        )

    # -------------------------
    # LIFECYCLE
    # -------------------------

    async def start(self) -> None:
        if self.is_active or self._starting:
            return
        if self.state is SessionState.STOPPED:
            raise RuntimeError("session already stopped; create a new session to start again")

        if not self._adapter.is_supported:
            error = CapabilityUnsupported("speech recognition is not supported on this client")
            self._record_start_failure(error)
            raise error

        self._starting = True
        try:
            handle = await self._capture.acquire()
        except CaptureSessionError as exc:
            self._record_start_failure(exc)
            raise
        finally:
            self._starting = False

        if self.state is SessionState.STOPPED:
            # stop() landed while the device prompt was open
            await self._capture.release(handle)
            self._log("start_abandoned", reason="stopped_during_acquire")
            return

        self._handle = handle
        self.state = SessionState.ACTIVE
        self.elapsed_seconds = 0
        self.silence_seconds = 0
        self.answers = []
        self.last_error = None
        self._accumulator.reset()
        self._turn = AnswerTurn(index=1)
        self._unsubscribe = self._adapter.subscribe(self._on_adapter_event)
        self._elapsed_timer.start()

        increment_metric("sessions_started_total")
        increment_metric("sessions_active")
        self._log("session_started", handle_id=handle.handle_id)

        await self._callbacks.emit("on_start")
        if self.is_active:
            self._spawn(self._listen_after(self._timing.listen_start_delay_sec, reason="initial"))

    async def stop(self, reason: str = "operator") -> None:
        if self.state is SessionState.STOPPED:
            return

        was_active = self.is_active
        self.state = SessionState.STOPPED
        self._elapsed_timer.cancel()
        self._silence_timer.cancel()
        handle, self._handle = self._handle, None

        try:
            await self._capture.release(handle)
            if was_active:
                try:
                    await self._adapter.stop()
                except AdapterError as exc:
                    logger.warning("Adapter stop failed during session stop | session_id=%s err=%s", self.session_id, exc)
        finally:
            await self._cancel_tasks()
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
            self.elapsed_seconds = 0
            self.silence_seconds = 0
            self._accumulator.reset()

        if not was_active:
            self._log("session_stopped", reason=reason, was_active=False)
            return

        await self._adapter.reset()
        increment_metric("sessions_stopped_total")
        decrement_metric("sessions_active")
        self._log("session_stopped", reason=reason, answers=len(self.answers))
        await self._callbacks.emit("on_stop")

    async def __aenter__(self) -> "InterviewCaptureSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop(reason="teardown")

    # -------------------------
    # OPERATOR ACTIONS
    # -------------------------

    async def next_answer(self) -> bool:
        """
        Manual "next": closes the current answer regardless of thresholds.
        No-op when inactive, when nothing was said, or when the host gate is closed.
        """
        if not self.is_active or self._accumulator.is_empty:
            return False
        if not self.can_proceed:
            logger.info("Manual next blocked by host gate | session_id=%s", self.session_id)
            return False
        return await self._finalize("manual") is not None

    # -------------------------
    # TIMER HANDLERS
    # -------------------------

    async def on_elapsed_tick(self) -> None:
        if not self.is_active:
            return
        self.elapsed_seconds += 1
        await self._callbacks.emit("on_tick", self.snapshot())

    async def on_silence_tick(self) -> None:
        if not self.is_active or not self._adapter.is_listening:
            return
        if not self._turn.is_open:
            return

        self.silence_seconds += 1
        decision = self._engine.evaluate(
            silence_seconds=self.silence_seconds,
            word_count=self._accumulator.word_count,
            char_count=self._accumulator.char_count,
        )
        if decision.should_finalize:
            await self._finalize("auto_advance")

    # -------------------------
    # ADAPTER EVENTS
    # -------------------------

    async def _on_adapter_event(self, event: TranscriptionEvent) -> None:
        if not self.is_active:
            return
        if event.kind == "transcript":
            await self._observe_transcript(event.text)
        elif event.kind == "listening":
            self._sync_silence_timer()
        elif event.kind == "error" and event.error is not None:
            await self._handle_adapter_error(event.error)

    async def _observe_transcript(self, text: str) -> None:
        if text == self._accumulator.text:
            return
        if self._accumulator.observe(text):
            self.silence_seconds = 0
        await self._callbacks.emit("on_transcript_update", text)

    async def _handle_adapter_error(self, info: ErrorInfo) -> None:
        self.last_error = info
        increment_metric("adapter_errors_total")
        logger.warning("Transcription adapter error | session_id=%s code=%s message=%s", self.session_id, info.code, info.message)
        self._log("adapter_error", code=info.code)
        self._sync_silence_timer()
        await self._callbacks.emit("on_error", info)

    def _sync_silence_timer(self) -> None:
        if self.is_active and self._adapter.is_listening:
            self._silence_timer.start()
        else:
            self._silence_timer.cancel()

    # -------------------------
    # FINALIZE
    # -------------------------

    async def _finalize(self, reason: str) -> AnswerRecord | None:
        turn = self._turn
        if not await turn.try_finalize(reason):
            return None

        text = self._accumulator.text
        record = AnswerRecord(
            index=turn.index,
            text=text,
            word_count=self._accumulator.word_count,
            reason=reason,
            elapsed_seconds=self.elapsed_seconds,
            silence_seconds=self.silence_seconds,
        )

        self._silence_timer.cancel()
        try:
            await self._adapter.stop()
        except AdapterError as exc:
            await self._handle_adapter_error(exc.to_info())

        if not self.is_active:
            self._log("finalize_abandoned", answer_index=turn.index, reason=reason)
            return None

        self.answers.append(record)
        increment_metric(f"answers_{reason}_total")
        self._log("answer_complete", answer_index=turn.index, reason=reason, answer=record.to_dict())
        await self._callbacks.emit("on_answer_complete", text)
        if not self.is_active:
            return record

        await self._adapter.reset()
        self._accumulator.reset()
        self.silence_seconds = 0
        await turn.mark_finalized()
        self._turn = AnswerTurn(index=turn.index + 1)

        self._spawn(self._listen_after(self._timing.settle_delay_sec, reason="settle"))
        return record

    async def _listen_after(self, delay_sec: float, reason: str) -> None:
        await asyncio.sleep(delay_sec)
        if not self.is_active:
            logger.info("Listen restart skipped; session no longer active | session_id=%s reason=%s", self.session_id, reason)
            return
        try:
            await self._adapter.start()
        except AdapterError as exc:
            await self._handle_adapter_error(exc.to_info())
            return
        self._sync_silence_timer()

    # -------------------------
    # INTERNALS
    # -------------------------

    def _spawn(self, coro) -> asyncio.Task:
        self._tasks = [t for t in self._tasks if not t.done()]
        task = asyncio.create_task(coro)
        self._tasks.append(task)
        return task

    async def _cancel_tasks(self) -> None:
        current = asyncio.current_task()
        tasks = [t for t in self._tasks if t is not current]
        self._tasks = []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _record_start_failure(self, exc: CaptureSessionError) -> None:
        record_start_failure(exc.code)
        logger.warning("Session start aborted | session_id=%s code=%s message=%s", self.session_id, exc.code, exc.message)
        self._log("start_failed", code=exc.code)

    def _log(self, event: str, **fields) -> None:
        log_event("session_controller", event, self.session_id, **fields)
