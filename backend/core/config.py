import os
from pathlib import Path
from dotenv import load_dotenv

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ENV_PATH = _BACKEND_ROOT / ".env"
load_dotenv(dotenv_path=_BACKEND_ENV_PATH, override=False)


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = str(os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return max(minimum, float(raw))
    except ValueError:
        return default


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = str(os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return max(minimum, int(raw))
    except ValueError:
        return default


QA_MODE = os.getenv("QA_MODE", "false").lower() == "true"

# Auto-advance heuristic (conservative: prefer waiting over cutting an answer short)
AUTO_ADVANCE_SILENCE_SEC = _env_int("AUTO_ADVANCE_SILENCE_SEC", 4, minimum=1)
AUTO_ADVANCE_MIN_WORDS = _env_int("AUTO_ADVANCE_MIN_WORDS", 15)
AUTO_ADVANCE_MIN_CHARS = _env_int("AUTO_ADVANCE_MIN_CHARS", 80)
ADVANCE_HINT_SILENCE_SEC = _env_int("ADVANCE_HINT_SILENCE_SEC", 2)

# Timing (seconds)
TICK_INTERVAL_SEC = _env_float("TICK_INTERVAL_SEC", 1.0, minimum=0.001)
SETTLE_DELAY_SEC = _env_float("SETTLE_DELAY_SEC", 1.5)
LISTEN_START_DELAY_SEC = _env_float("LISTEN_START_DELAY_SEC", 0.1)
CAPTURE_ACQUIRE_TIMEOUT_SEC = _env_float("CAPTURE_ACQUIRE_TIMEOUT_SEC", 15.0, minimum=0.1)

# Host
SESSION_INACTIVE_TTL_SEC = _env_float("SESSION_INACTIVE_TTL_SEC", 900.0, minimum=30.0)
CORS_ALLOW_ORIGINS = str(os.getenv("CORS_ALLOW_ORIGINS") or "").strip()
