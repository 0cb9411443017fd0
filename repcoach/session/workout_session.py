"""
Workout session: one validator bound to one exercise, plus the running
totals the game layer reports at the end (reps, duration, mean form score
of credited reps). In-memory only.
"""

import uuid
from typing import List, Optional

from repcoach.models.exercise_model import ExerciseType
from repcoach.models.frame_model import Frame
from repcoach.models.session_model import SessionSummary
from repcoach.models.validation_model import ValidationResult
from repcoach.utils.logger import log, warn
from repcoach.validators.registry import create_validator


class WorkoutSession:

    def __init__(self, exercise, session_id: Optional[str] = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.exercise = ExerciseType(exercise)
        self.validator = create_validator(self.exercise)
        self.started_at: Optional[int] = None
        self.last_timestamp: Optional[int] = None
        self.frames_processed = 0
        self.rep_form_scores: List[float] = []

    def process(self, frame: Frame) -> ValidationResult:
        """Feed exactly one frame; callers must not resubmit the same frame."""
        if self.last_timestamp is not None and frame.timestamp < self.last_timestamp:
            warn(
                f"[SESSION] {self.session_id} timestamp went backwards "
                f"{self.last_timestamp} -> {frame.timestamp}"
            )
        if self.started_at is None:
            self.started_at = frame.timestamp
        self.last_timestamp = frame.timestamp
        self.frames_processed += 1

        result = self.validator.validate(frame)

        if result.completed_rep:
            self.rep_form_scores.append(result.form_score)
            log(
                f"[SESSION] {self.session_id} {self.exercise.value} "
                f"reps={self.validator.get_rep_count()}"
            )
        return result

    def reset(self) -> None:
        self.validator.reset()
        self.started_at = None
        self.last_timestamp = None
        self.frames_processed = 0
        self.rep_form_scores = []

    @property
    def duration_ms(self) -> int:
        if self.started_at is None or self.last_timestamp is None:
            return 0
        return max(0, self.last_timestamp - self.started_at)

    @property
    def average_form_score(self) -> float:
        if not self.rep_form_scores:
            return 0.0
        return sum(self.rep_form_scores) / len(self.rep_form_scores)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            exercise=self.exercise,
            total_reps=self.validator.get_rep_count(),
            phase=self.validator.get_current_phase(),
            frames_processed=self.frames_processed,
            duration_ms=self.duration_ms,
            average_form_score=round(self.average_form_score, 3),
        )
