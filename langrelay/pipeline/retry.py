# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
from abc import ABC, abstractmethod


class RetryExhaustedError(RuntimeError):
    def __init__(self, message, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class RetryPolicy(ABC):
    @abstractmethod
    def delay(self, attempt: int) -> float | None:
        """Seconds to wait before retry number `attempt` (1-based), or None to give up."""


class FixedDelay(RetryPolicy):
    def __init__(self, seconds: float):
        self.seconds = seconds

    def delay(self, attempt: int) -> float | None:
        return self.seconds

    def __repr__(self):
        return f"FixedDelay({self.seconds})"


class CappedExponential(RetryPolicy):
    def __init__(self, base: float, cap: float, factor: float = 2):
        self.base = base
        self.cap = cap
        self.factor = factor

    def delay(self, attempt: int) -> float | None:
        return min(self.cap, self.base * self.factor ** (attempt - 1))

    def __repr__(self):
        return f"CappedExponential({self.base}, {self.cap}, factor={self.factor})"


class MaxAttempts(RetryPolicy):
    def __init__(self, inner: RetryPolicy, max_attempts: int):
        self.inner = inner
        self.max_attempts = max_attempts

    def delay(self, attempt: int) -> float | None:
        if attempt > self.max_attempts:
            return None
        return self.inner.delay(attempt)

    def __repr__(self):
        return f"MaxAttempts({self.inner!r}, {self.max_attempts})"
