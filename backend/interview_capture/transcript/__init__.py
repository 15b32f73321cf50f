from interview_capture.transcript.accumulator import TranscriptAccumulator, count_words
from interview_capture.transcript.models import AnswerRecord

__all__ = ["AnswerRecord", "TranscriptAccumulator", "count_words"]
