from interview_capture.capture.base import CaptureHandle, CaptureResourceManager, ViewSurface
from interview_capture.capture.remote import RemoteCaptureManager

__all__ = ["CaptureHandle", "CaptureResourceManager", "RemoteCaptureManager", "ViewSurface"]
