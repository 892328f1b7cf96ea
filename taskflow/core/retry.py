"""Inter-retry delay strategies.

A failed attempt is followed by a pause before the next one.  The length of
that pause is decided by a :class:`RetryPolicy`; the engine ships a constant
delay and an exponential backoff, and callers may supply their own.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from taskflow.config import Settings


class RetryPolicy(ABC):
    """Decides how long to wait before a retry."""

    @abstractmethod
    def delay_for(self, retry_number: int) -> float:
        """Return the delay in seconds before retry *retry_number* (1-based)."""
        ...


class ConstantDelay(RetryPolicy):
    """The same pause before every retry."""

    def __init__(self, seconds: float = 2.0) -> None:
        if seconds < 0:
            raise ValueError("delay must be non-negative")
        self.seconds = seconds

    def delay_for(self, retry_number: int) -> float:
        return self.seconds

    def __repr__(self) -> str:
        return f"ConstantDelay({self.seconds:g})"


class ExponentialBackoff(RetryPolicy):
    """``base * factor ** (n - 1)`` seconds, capped at *max_delay*."""

    def __init__(
        self,
        base: float = 1.0,
        factor: float = 2.0,
        max_delay: float = 30.0,
    ) -> None:
        if base < 0 or max_delay < 0:
            raise ValueError("delays must be non-negative")
        if factor < 1:
            raise ValueError("factor must be >= 1")
        self.base = base
        self.factor = factor
        self.max_delay = max_delay

    def delay_for(self, retry_number: int) -> float:
        exponent = max(retry_number - 1, 0)
        return min(self.base * self.factor ** exponent, self.max_delay)

    def __repr__(self) -> str:
        return (
            f"ExponentialBackoff(base={self.base:g}, factor={self.factor:g}, "
            f"max_delay={self.max_delay:g})"
        )


def build_retry_policy(config: Settings) -> RetryPolicy:
    """Construct the policy named by ``config.retry_strategy``."""
    if config.retry_strategy == "exponential":
        return ExponentialBackoff(
            base=config.retry_delay_seconds,
            factor=config.retry_backoff_factor,
            max_delay=config.retry_max_delay_seconds,
        )
    return ConstantDelay(config.retry_delay_seconds)
