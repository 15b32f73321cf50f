from __future__ import annotations

from dataclasses import dataclass, field
import time


@dataclass(frozen=True)
class ErrorInfo:
    code: str
    message: str = ""
    ts: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "ts": self.ts,
        }


class CaptureSessionError(Exception):
    """
    Base for everything the capture core raises.
    `code` is the stable identifier surfaced to the operator.
    """

    code = "capture_session_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(code=self.code, message=self.message)


class CapabilityUnsupported(CaptureSessionError):
    code = "capability_unsupported"


class CaptureError(CaptureSessionError):
    code = "capture_error"


class PermissionDenied(CaptureError):
    code = "permission_denied"


class DeviceUnavailable(CaptureError):
    code = "device_unavailable"


class AdapterError(CaptureSessionError):
    code = "adapter_error"

    def __init__(self, info: ErrorInfo):
        super().__init__(info.message or info.code)
        self.info = info

    def to_info(self) -> ErrorInfo:
        return self.info
