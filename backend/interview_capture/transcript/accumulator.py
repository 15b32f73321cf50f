import re

_WHITESPACE = re.compile(r"\s+")


def count_words(text: str) -> int:
    return len([w for w in _WHITESPACE.split(str(text or "").strip()) if w])


class TranscriptAccumulator:
    """
    Holds the live transcript for the answer currently being given.

    The watermark is the trimmed length last seen; any change to it is
    "content changed", which is what resets the silence window.
    Word and character counts are always derived from `text`.
    """

    def __init__(self):
        self._text: str = ""
        self.last_observed_length: int = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def char_count(self) -> int:
        return len(self._text.strip())

    @property
    def word_count(self) -> int:
        return count_words(self._text)

    @property
    def is_empty(self) -> bool:
        return self.char_count == 0

    def observe(self, text: str) -> bool:
        """
        Take the adapter's current text. Returns True when content changed.
        """
        self._text = str(text or "")
        current_length = self.char_count
        if current_length == self.last_observed_length:
            return False
        self.last_observed_length = current_length
        return True

    def reset(self) -> None:
        self._text = ""
        self.last_observed_length = 0
