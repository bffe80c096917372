"""Request fingerprint randomization.

Picks a user agent from a fixed rotation for every outbound request (proxy
probes and searches) and generates the randomized inter-request jitter used
by the scheduler to spread request timing.
"""

from __future__ import annotations

import random


# ---------------------------------------------------------------------------
# Fixed user agent rotation, desktop and mobile browsers
# ---------------------------------------------------------------------------

USER_AGENTS: list[str] = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/85.0.4183.102 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/88.0.4324.96 Safari/537.36",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0 Mobile/15A372 Safari/604.1",
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64; rv:85.0) Gecko/20100101 Firefox/85.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:92.0) Gecko/20100101 Firefox/92.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 11_2_3) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0.3 Safari/605.1.15",
    "Mozilla/5.0 (iPad; CPU OS 14_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0 Mobile/15E148 Safari/604.1",
]


class FingerprintRandomizer:
    """Random source for user agents and jitter delays.

    A seeded ``random.Random`` can be injected so tests get deterministic
    choices.
    """

    def __init__(self, *, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def user_agent(self) -> str:
        """Return a user agent from the fixed rotation."""
        return self._rng.choice(USER_AGENTS)

    def headers(self) -> dict[str, str]:
        """Return request headers carrying a freshly chosen user agent."""
        return {"User-Agent": self.user_agent()}

    def get_action_delay(self, min_seconds: float = 1.0, max_seconds: float = 2.0) -> float:
        """Return a random delay in seconds within the given range.

        Returns ``0.0`` when the range is empty so jitter can be disabled.
        """
        if max_seconds <= 0:
            return 0.0
        return self._rng.uniform(min_seconds, max_seconds)
