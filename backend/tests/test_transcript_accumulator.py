from interview_capture.transcript import TranscriptAccumulator, count_words


def test_count_words_splits_on_whitespace_runs():
    assert count_words("") == 0
    assert count_words("   ") == 0
    assert count_words("one") == 1
    assert count_words("  one \n two\t\tthree  ") == 3


def test_observe_reports_growth_and_updates_watermark():
    acc = TranscriptAccumulator()

    assert acc.observe("hello") is True
    assert acc.last_observed_length == 5
    assert acc.word_count == 1

    assert acc.observe("hello") is False
    assert acc.observe("hello there") is True
    assert acc.last_observed_length == 11
    assert acc.word_count == 2


def test_trailing_whitespace_is_not_new_content():
    acc = TranscriptAccumulator()
    acc.observe("hello there")

    assert acc.observe("hello there   ") is False
    assert acc.text == "hello there   "
    assert acc.char_count == 11


def test_counts_always_follow_current_text():
    acc = TranscriptAccumulator()
    acc.observe("one two three four")
    acc.observe("one two")

    assert acc.word_count == 2
    assert acc.char_count == len("one two")
    assert acc.last_observed_length == len("one two")


def test_reset_clears_text_and_watermark():
    acc = TranscriptAccumulator()
    acc.observe("something was said")
    acc.reset()

    assert acc.text == ""
    assert acc.is_empty
    assert acc.word_count == 0
    assert acc.last_observed_length == 0
