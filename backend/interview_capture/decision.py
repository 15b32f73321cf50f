from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from interview_capture.transcript import rules


@dataclass(frozen=True)
class AdvanceThresholds:
    silence_sec: int = rules.AUTO_ADVANCE_SILENCE_SEC
    min_words: int = rules.AUTO_ADVANCE_MIN_WORDS
    min_chars: int = rules.AUTO_ADVANCE_MIN_CHARS
    hint_after_sec: int = rules.ADVANCE_HINT_SILENCE_SEC


@dataclass(frozen=True)
class AdvanceDecision:
    should_finalize: bool
    countdown_hint: Optional[int] = None


class AutoAdvanceDecisionEngine:
    """
    Decides when a spoken answer is done.

    All three conditions must hold on the same tick: enough silence,
    enough words, enough characters. Below that the engine only
    surfaces a countdown hint so the operator sees it coming.
    """

    def __init__(self, thresholds: AdvanceThresholds | None = None):
        self.thresholds = thresholds or AdvanceThresholds()

    def countdown_hint(self, silence_seconds: int) -> Optional[int]:
        t = self.thresholds
        if silence_seconds < t.hint_after_sec or silence_seconds >= t.silence_sec:
            return None
        return t.silence_sec - silence_seconds

    def has_enough_content(self, word_count: int, char_count: int) -> bool:
        return word_count >= self.thresholds.min_words and char_count > self.thresholds.min_chars

    def evaluate(self, silence_seconds: int, word_count: int, char_count: int) -> AdvanceDecision:
        if char_count <= 0:
            return AdvanceDecision(should_finalize=False)

        should_finalize = (
            silence_seconds >= self.thresholds.silence_sec
            and self.has_enough_content(word_count, char_count)
        )
        return AdvanceDecision(
            should_finalize=should_finalize,
            countdown_hint=None if should_finalize else self.countdown_hint(silence_seconds),
        )
