import time
from typing import Protocol


class Clock(Protocol):
    def now_ms(self) -> int: ...


class SystemClock:
    """Wall clock. Only the session layer reads it; validators use frame timestamps."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class ManualClock:
    """Replay / test clock advanced by hand."""

    def __init__(self, start_ms: int = 0):
        self.current = start_ms

    def now_ms(self) -> int:
        return self.current

    def advance(self, ms: int) -> int:
        self.current += ms
        return self.current
