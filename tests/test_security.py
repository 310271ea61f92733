"""
Tests unitaires pour le limiteur de requêtes.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from otel_assistant.api.security import RateLimiter, RateLimitExceeded


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestRateLimiter:
    """Tests pour la fenêtre fixe par client."""

    def setup_method(self):
        self.clock = FakeClock()
        self.limiter = RateLimiter(max_requests=3, window_seconds=60, clock=self.clock)

    def test_requests_under_quota(self):
        for _ in range(3):
            self.limiter.hit("10.0.0.1")

    def test_quota_exceeded(self):
        for _ in range(3):
            self.limiter.hit("10.0.0.1")

        self.clock.now = 20.0
        with pytest.raises(RateLimitExceeded) as exc_info:
            self.limiter.hit("10.0.0.1")

        assert exc_info.value.retry_after == 41

    def test_clients_are_independent(self):
        for _ in range(3):
            self.limiter.hit("10.0.0.1")

        self.limiter.hit("10.0.0.2")

    def test_window_reset(self):
        """Vérifie la remise à zéro à la fin de la fenêtre."""
        for _ in range(3):
            self.limiter.hit("10.0.0.1")

        self.clock.now = 60.0
        self.limiter.hit("10.0.0.1")

    def test_rejected_requests_are_not_counted(self):
        for _ in range(3):
            self.limiter.hit("10.0.0.1")
        for _ in range(5):
            with pytest.raises(RateLimitExceeded):
                self.limiter.hit("10.0.0.1")

        self.clock.now = 61.0
        for _ in range(3):
            self.limiter.hit("10.0.0.1")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
