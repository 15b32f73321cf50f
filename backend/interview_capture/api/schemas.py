from pydantic import BaseModel


CLIENT_MESSAGE_TYPES = {
    "hello",
    "start",
    "stop",
    "next",
    "can_proceed",
    "capture_granted",
    "capture_denied",
    "transcript",
    "listening",
    "stt_error",
    "pong",
}


class ClientMessage(BaseModel):
    type: str
    speech_supported: bool | None = None
    value: bool | None = None
    text: str | None = None
    request_id: str | None = None
    tracks: list[str] | None = None
    reason: str | None = None
    code: str | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    status: str
    sessions_active: int
    connections_active: int
