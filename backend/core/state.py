# backend/core/state.py

from enum import Enum

class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    STOPPED = "stopped"


class MicStatus(str, Enum):
    UNSUPPORTED = "unsupported"
    ERROR = "error"
    RECORDING = "recording"
    OFF = "off"
