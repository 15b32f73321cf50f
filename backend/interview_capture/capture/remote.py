from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable
import uuid

from interview_capture.capture.base import CaptureHandle, CaptureResourceManager, ViewSurface
from interview_capture.errors import DeviceUnavailable, PermissionDenied
from core.config import CAPTURE_ACQUIRE_TIMEOUT_SEC

logger = logging.getLogger("capture.remote")

SendFn = Callable[[dict], Awaitable[None]]


class RemoteCaptureManager(CaptureResourceManager):
    """
    Capture device living in the operator's browser.

    acquire() asks the client for the camera and microphone and waits
    for its capture_granted / capture_denied reply. The reply arrives as
    a separate websocket message, so resolution happens via grant()/deny().
    """

    def __init__(
        self,
        send_fn: SendFn,
        timeout_sec: float = CAPTURE_ACQUIRE_TIMEOUT_SEC,
        auto_grant: bool = False,
        view: ViewSurface | None = None,
    ):
        super().__init__(view=view)
        self._send_fn = send_fn
        self.timeout_sec = timeout_sec
        self.auto_grant = auto_grant
        self._pending: asyncio.Future | None = None
        self._pending_request_id: str | None = None

    @property
    def awaiting_reply(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def _open(self) -> CaptureHandle:
        if self.auto_grant:
            return CaptureHandle(metadata={"source": "auto_grant"})

        request_id = str(uuid.uuid4())
        loop = asyncio.get_running_loop()
        self._pending = loop.create_future()
        self._pending_request_id = request_id
        try:
            await self._send_fn({
                "type": "capture_request",
                "request_id": request_id,
                "tracks": ["audio", "video"],
            })
            return await asyncio.wait_for(self._pending, timeout=self.timeout_sec)
        except asyncio.TimeoutError as exc:
            raise DeviceUnavailable(f"no capture reply within {self.timeout_sec:g}s") from exc
        finally:
            self._pending = None
            self._pending_request_id = None

    async def _close(self, handle: CaptureHandle) -> None:
        if handle.metadata.get("source") == "auto_grant":
            return
        await self._send_fn({
            "type": "capture_release",
            "handle_id": handle.handle_id,
        })

    def grant(self, tracks: list[str] | None = None, request_id: str | None = None) -> bool:
        if not self._matches(request_id):
            logger.warning("capture_granted with no matching request ignored | request_id=%s", request_id)
            return False
        handle = CaptureHandle(
            tracks=tuple(tracks or ("audio", "video")),
            metadata={"source": "remote", "request_id": self._pending_request_id},
        )
        self._pending.set_result(handle)
        return True

    def deny(self, reason: str, message: str = "", request_id: str | None = None) -> bool:
        if not self._matches(request_id):
            logger.warning("capture_denied with no matching request ignored | request_id=%s", request_id)
            return False
        normalized = str(reason or "").strip().lower()
        if normalized in {"permission", "permission_denied", "notallowederror"}:
            exc = PermissionDenied(message or "camera and microphone access denied")
        else:
            exc = DeviceUnavailable(message or f"capture device unavailable ({normalized or 'unknown'})")
        self._pending.set_exception(exc)
        return True

    def fail_pending(self, message: str = "client disconnected") -> None:
        if self.awaiting_reply:
            self._pending.set_exception(DeviceUnavailable(message))

    def _matches(self, request_id: str | None) -> bool:
        if not self.awaiting_reply:
            return False
        return request_id is None or request_id == self._pending_request_id
