"""
All turn-taking thresholds live here.
Changing these changes system behavior.
"""

from core import config

# Silence thresholds (seconds of continuous listening with no transcript growth)
AUTO_ADVANCE_SILENCE_SEC = config.AUTO_ADVANCE_SILENCE_SEC
ADVANCE_HINT_SILENCE_SEC = min(config.ADVANCE_HINT_SILENCE_SEC, AUTO_ADVANCE_SILENCE_SEC)

# Minimum content before an answer may close on its own
AUTO_ADVANCE_MIN_WORDS = config.AUTO_ADVANCE_MIN_WORDS
AUTO_ADVANCE_MIN_CHARS = config.AUTO_ADVANCE_MIN_CHARS  # trimmed length must be strictly greater

# Pause between closing one answer and listening for the next.
# Restarting recognition immediately returns stale partials from the old turn.
SETTLE_DELAY_SEC = config.SETTLE_DELAY_SEC

# Pause between capture setup and the first listen request
LISTEN_START_DELAY_SEC = config.LISTEN_START_DELAY_SEC

TICK_INTERVAL_SEC = config.TICK_INTERVAL_SEC
