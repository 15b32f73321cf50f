from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import asyncio
import json
import logging
import uuid

from pydantic import ValidationError
from starlette.websockets import WebSocketState

from interview_capture.api.schemas import CLIENT_MESSAGE_TYPES, ClientMessage
from interview_capture.capture.remote import RemoteCaptureManager
from interview_capture.decision import AdvanceThresholds
from interview_capture.errors import CaptureSessionError, ErrorInfo
from interview_capture.session.callbacks import SessionCallbacks
from interview_capture.session.controller import InterviewCaptureSession
from interview_capture.session.registry import session_registry
from interview_capture.session.snapshot import SessionSnapshot
from interview_capture.system_metrics import decrement_metric, increment_metric
from interview_capture.transcript import count_words
from interview_capture.transcription.remote import RemoteTranscriptionAdapter
from core.config import QA_MODE
from core.state import SessionState
from core.logger import log_event

logging.basicConfig(
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger("ws_interview")

router = APIRouter()


def _truthy(raw: str | None) -> bool:
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


@router.websocket("/ws/interview")
async def interview_ws(websocket: WebSocket):
    # ================= LIFECYCLE OWNER =================
    connection_id = str(uuid.uuid4())
    stop_reason = "other"
    send_lock = asyncio.Lock()

    await websocket.accept()

    def _log_event(event: str, **fields):
        log_event("ws_interview", event, connection_id, **fields)

    async def _safe_send(payload: dict):
        if websocket.client_state != WebSocketState.CONNECTED:
            return
        try:
            encoded = json.dumps(payload, default=str)
        except (TypeError, ValueError) as exc:
            logger.warning("ws payload encode failed | connection_id=%s err=%s", connection_id, exc)
            return
        try:
            async with send_lock:
                await websocket.send_text(encoded)
        except Exception as exc:
            logger.warning("ws send failed | connection_id=%s err=%s", connection_id, exc)

    capture = RemoteCaptureManager(send_fn=_safe_send, auto_grant=QA_MODE)
    adapter = RemoteTranscriptionAdapter(
        send_fn=_safe_send,
        speech_supported=_truthy(websocket.query_params.get("speech_supported")),
    )
    session: InterviewCaptureSession | None = None
    start_task: asyncio.Task | None = None
    can_proceed = True

    session_registry.register(connection_id)
    increment_metric("ws_connections_active", 1)
    _log_event("connect", qa_mode=QA_MODE)

    thresholds = AdvanceThresholds()
    await _safe_send({
        "type": "session",
        "connection_id": connection_id,
        "thresholds": {
            "silence_sec": thresholds.silence_sec,
            "min_words": thresholds.min_words,
            "min_chars": thresholds.min_chars,
            "hint_after_sec": thresholds.hint_after_sec,
        },
    })

    # ================= HOST CALLBACKS =================
    async def _on_start():
        await _safe_send({"type": "started", "session_id": session.session_id if session else None})

    async def _on_stop():
        await _safe_send({"type": "stopped"})

    async def _on_transcript_update(text: str):
        await _safe_send({
            "type": "transcript",
            "text": text,
            "word_count": count_words(text),
        })

    async def _on_answer_complete(text: str):
        answer = session.answers[-1].to_dict() if session and session.answers else {"text": text}
        await _safe_send({"type": "answer_complete", "text": text, "answer": answer})

    async def _on_error(info: ErrorInfo):
        await _safe_send({"type": "error", "code": info.code, "message": info.message, "fatal": False})

    async def _on_tick(snapshot: SessionSnapshot):
        await _safe_send({"type": "status", **snapshot.to_dict()})

    callbacks = SessionCallbacks(
        on_start=_on_start,
        on_stop=_on_stop,
        on_transcript_update=_on_transcript_update,
        on_answer_complete=_on_answer_complete,
        on_error=_on_error,
        on_tick=_on_tick,
    )

    # ================= OPERATOR ACTIONS =================
    async def _start():
        nonlocal session
        if session is not None and (session.is_active or session.starting):
            return
        # a stopped or failed-to-start session is spent; each run gets a fresh one
        current = InterviewCaptureSession(
            adapter=adapter,
            capture=capture,
            callbacks=callbacks,
            thresholds=thresholds,
            can_proceed=can_proceed,
        )
        session = current
        session_registry.bind(connection_id, current)
        try:
            await current.start()
        except CaptureSessionError as exc:
            if current.state is SessionState.STOPPED:
                _log_event("start_cancelled", code=exc.code)
                return
            await _safe_send({"type": "error", "code": exc.code, "message": exc.message, "fatal": True})

    async def _stop(reason: str):
        if session is not None:
            await session.stop(reason=reason)
        capture.fail_pending("start cancelled")

    async def _dispatch(msg: ClientMessage):
        nonlocal start_task, can_proceed
        kind = msg.type

        if kind == "hello":
            adapter.set_supported(bool(msg.speech_supported))
        elif kind == "start":
            if start_task is None or start_task.done():
                start_task = asyncio.create_task(_start())
        elif kind == "stop":
            await _stop("operator")
        elif kind == "next":
            if session is None or not await session.next_answer():
                _log_event("next_ignored")
        elif kind == "can_proceed":
            can_proceed = bool(msg.value)
            if session is not None:
                session.can_proceed = can_proceed
        elif kind == "capture_granted":
            capture.grant(tracks=msg.tracks, request_id=msg.request_id)
        elif kind == "capture_denied":
            capture.deny(reason=msg.reason or "", message=msg.message or "", request_id=msg.request_id)
        elif kind == "transcript":
            await adapter.on_transcript(msg.text or "")
        elif kind == "listening":
            await adapter.on_listening(bool(msg.value))
        elif kind == "stt_error":
            await adapter.on_error(code=msg.code or "stt_error", message=msg.message or "")

    # ================= RECEIVE LOOP =================
    try:
        while True:
            raw = await websocket.receive_text()
            session_registry.touch(connection_id)
            try:
                msg = ClientMessage.model_validate(json.loads(raw))
            except (json.JSONDecodeError, ValidationError) as exc:
                logger.warning("Invalid WS message | connection_id=%s err=%s", connection_id, exc)
                await _safe_send({"type": "error", "code": "invalid_message", "message": "malformed message", "fatal": False})
                continue

            if msg.type not in CLIENT_MESSAGE_TYPES:
                await _safe_send({"type": "error", "code": "unknown_message", "message": msg.type, "fatal": False})
                continue

            await _dispatch(msg)
    except WebSocketDisconnect:
        stop_reason = "client_disconnect"
    finally:
        await _stop("teardown")
        if start_task is not None:
            await asyncio.gather(start_task, return_exceptions=True)
        session_registry.mark_inactive(connection_id)
        decrement_metric("ws_connections_active", 1)
        _log_event("disconnect", reason=stop_reason)
