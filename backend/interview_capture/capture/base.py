from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import logging
import time
from typing import AsyncIterator, Protocol
import uuid

from interview_capture.errors import DeviceUnavailable

logging.basicConfig(
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger("capture")


@dataclass
class CaptureHandle:
    """
    A live audio+video device stream. Owned by exactly one session.
    """
    handle_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    tracks: tuple[str, ...] = ("audio", "video")
    acquired_at: float = field(default_factory=time.time)
    released: bool = False
    released_at: float | None = None
    metadata: dict = field(default_factory=dict)


class ViewSurface(Protocol):
    """Passive operator preview. Nothing reads back from it."""

    def attach(self, handle: CaptureHandle) -> None:
        ...

    def detach(self) -> None:
        ...


class CaptureResourceManager:
    """
    Acquires and releases the capture device for one host context.

    Only one handle may be live at a time. release() is idempotent and
    accepts None or an already-released handle. Subclasses provide
    _open() and _close().
    """

    def __init__(self, view: ViewSurface | None = None):
        self.view = view
        self._live: CaptureHandle | None = None
        self._acquiring = False

    @property
    def live_handle(self) -> CaptureHandle | None:
        return self._live

    @property
    def busy(self) -> bool:
        return self._acquiring or self._live is not None

    async def acquire(self) -> CaptureHandle:
        if self.busy:
            raise DeviceUnavailable("capture device busy")

        self._acquiring = True
        try:
            handle = await self._open()
        finally:
            self._acquiring = False

        self._live = handle
        if self.view is not None:
            self.view.attach(handle)
        logger.info("Capture acquired | handle=%s tracks=%s", handle.handle_id, ",".join(handle.tracks))
        return handle

    async def release(self, handle: CaptureHandle | None) -> None:
        if handle is None or handle.released:
            return

        handle.released = True
        handle.released_at = time.time()
        if self._live is handle:
            self._live = None
            if self.view is not None:
                self.view.detach()

        try:
            await self._close(handle)
        except Exception as exc:
            logger.warning("Capture close failed (handle already marked released) | handle=%s err=%s", handle.handle_id, exc)
        logger.info("Capture released | handle=%s", handle.handle_id)

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[CaptureHandle]:
        handle = await self.acquire()
        try:
            yield handle
        finally:
            await self.release(handle)

    async def _open(self) -> CaptureHandle:
        raise NotImplementedError

    async def _close(self, handle: CaptureHandle) -> None:
        return
