"""
core.py - Shared validator capability
=====================================
Rep counting, majority-vote smoothing, minimum-interval gating and input
screening. Each exercise validator holds one ValidatorCore by value.
"""

import math
from typing import Iterable, List, Optional, Tuple

from repcoach.models.frame_model import Frame, Landmark
from repcoach.models.validation_model import ValidationResult
from repcoach.utils.landmarks import get_landmark


class RingBuffer:
    """Fixed-capacity boolean buffer: list storage plus a write index."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.slots: List[bool] = [False] * capacity
        self.write_index = 0
        self.size = 0

    def push(self, value: bool) -> None:
        self.slots[self.write_index] = value
        self.write_index = (self.write_index + 1) % self.capacity
        self.size = min(self.size + 1, self.capacity)

    def count_true(self) -> int:
        # Unwritten slots hold False
        return sum(1 for v in self.slots if v)

    def clear(self) -> None:
        self.slots = [False] * self.capacity
        self.write_index = 0
        self.size = 0

    def __len__(self):
        return self.size


class ValidatorCore:
    """
    State and helpers every validator composes:

    - rep_count: monotonic within a session, zeroed only by reset()
    - history: last HISTORY_SIZE raw pass/fail decisions
    - last_event_timestamp: frame time (ms) of the last credited event
    """

    HISTORY_SIZE = 5
    MAJORITY_RATIO = 0.6
    MIN_FRAME_CONFIDENCE = 0.6
    MIN_VISIBILITY = 0.5

    def __init__(self):
        self.rep_count = 0
        self.history = RingBuffer(self.HISTORY_SIZE)
        self.last_event_timestamp = 0

    def reset(self) -> None:
        self.rep_count = 0
        self.history.clear()
        self.last_event_timestamp = 0

    # -----------------------------------------------------
    # Scoring & smoothing
    # -----------------------------------------------------

    @classmethod
    def is_reliable(cls, landmark: Optional[Landmark]) -> bool:
        return (
            landmark is not None
            and landmark.visibility is not None
            and landmark.visibility >= cls.MIN_VISIBILITY
        )

    @staticmethod
    def form_score(criteria: Iterable[bool]) -> float:
        criteria = list(criteria)
        if not criteria:
            return 0.0
        return sum(1 for c in criteria if c) / len(criteria)

    def record_and_smooth(self, valid: bool) -> bool:
        """Push the raw decision; True when at least 3 of the last 5 passed."""
        self.history.push(bool(valid))
        needed = math.ceil(self.HISTORY_SIZE * self.MAJORITY_RATIO)
        return self.history.count_true() >= needed

    def time_gate_elapsed(self, now_ms: int, min_interval_ms: int) -> bool:
        """True (and the gate re-arms at now_ms) once min_interval_ms has passed."""
        if now_ms - self.last_event_timestamp >= min_interval_ms:
            self.last_event_timestamp = now_ms
            return True
        return False

    def credit_rep(self) -> int:
        self.rep_count += 1
        return self.rep_count

    # -----------------------------------------------------
    # Input screening
    # -----------------------------------------------------

    def screen(
        self,
        frame: Frame,
        required: Iterable[int],
        not_visible_text: str,
        low_confidence_text: str,
    ) -> Tuple[bool, Optional[ValidationResult]]:
        """
        Gate a frame before any geometry runs.

        Returns (True, None) for a usable frame, otherwise (False, sentinel)
        where the sentinel is an invalid, zero-score result. Never touches
        rep_count, history or the time gate.
        """
        if frame.confidence < self.MIN_FRAME_CONFIDENCE:
            return False, self.rejected(low_confidence_text)

        for idx in required:
            if not self.is_reliable(get_landmark(frame.landmarks, idx)):
                return False, self.rejected(not_visible_text)

        return True, None

    @staticmethod
    def rejected(text: str) -> ValidationResult:
        return ValidationResult(
            is_valid=False,
            feedback=[text],
            completed_rep=False,
            form_score=0.0,
        )
