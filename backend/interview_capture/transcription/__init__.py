from interview_capture.transcription.base import TranscriptionAdapter, TranscriptionEvent
from interview_capture.transcription.remote import RemoteTranscriptionAdapter

__all__ = ["RemoteTranscriptionAdapter", "TranscriptionAdapter", "TranscriptionEvent"]
