r"""Default values shared by retry policies and configuration helpers."""

from __future__ import annotations

__all__ = ["DEFAULT_BASE_DELAY", "DEFAULT_MAX_ATTEMPTS", "FOREVER", "MAX_WAIT_TIME"]

# Default maximum number of attempts, including the first one
DEFAULT_MAX_ATTEMPTS = 3

# Default base delay for exponential backoff
# Wait time = base_delay * (2 ** (attempt - 1))
# With 0.3: waits 0.3s after the 1st failure, 0.6s after the 2nd, 1.2s after the 3rd
DEFAULT_BASE_DELAY = 0.3

# Textual value selecting an unbounded attempt budget in plain configuration
FOREVER = "forever"

# Longest single wait between two attempts, in seconds (30 days).
# Longer waits overflow threading.Event.wait on some platforms
MAX_WAIT_TIME = 30 * 24 * 60 * 60.0
