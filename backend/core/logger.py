import json
import logging
from typing import Any

logger = logging.getLogger("interview_capture.events")

# Spoken content never reaches the logs; only its size does.
REDACTED_KEYS = {"text", "transcript", "transcript_text", "answer_text", "message_text"}


def _redact(value: Any) -> dict:
	text = str(value or "")
	return {
		"redacted": True,
		"length": len(text),
	}


def _sanitize_value(key: str, value: Any) -> Any:
	normalized_key = str(key or "").lower()
	if isinstance(value, dict):
		# answer records keep their metadata; nested text fields are redacted
		return {str(k): _sanitize_value(str(k), v) for k, v in value.items()}
	if normalized_key in REDACTED_KEYS or normalized_key == "answer":
		return _redact(value)
	if isinstance(value, (str, int, float, bool)) or value is None:
		return value
	if isinstance(value, (list, tuple, set)):
		return [_sanitize_value(normalized_key, item) for item in value]
	return str(value)


def log_event(component: str, event: str, session_id: str, **kwargs) -> None:
	payload = {
		"component": str(component or "capture"),
		"event": str(event or "unknown"),
		"session_id": str(session_id or ""),
	}
	payload.update({str(k): _sanitize_value(str(k), v) for k, v in kwargs.items()})
	logger.info(json.dumps(payload, ensure_ascii=False, default=str))
