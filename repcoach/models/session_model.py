from pydantic import BaseModel, Field
from typing import List, Optional

from repcoach.models.exercise_model import ExerciseType
from repcoach.models.frame_model import MAX_LANDMARKS, Frame, Landmark
from repcoach.models.validation_model import ValidationResult


class CreateSessionRequest(BaseModel):
    exercise: ExerciseType


class FrameIn(BaseModel):
    """Frame as posted by a client; unstamped frames get the server clock."""
    landmarks: List[Optional[Landmark]] = Field(default_factory=list, max_length=MAX_LANDMARKS)
    confidence: float = 0.0
    timestamp: Optional[int] = None

    def to_frame(self, fallback_ms: int) -> Frame:
        return Frame(
            landmarks=self.landmarks,
            confidence=self.confidence,
            timestamp=self.timestamp if self.timestamp is not None else fallback_ms,
        )


class FrameResponse(ValidationResult):
    rep_count: int = 0
    phase: str = ""


class SessionSummary(BaseModel):
    session_id: str
    exercise: ExerciseType
    total_reps: int = 0
    phase: str = ""
    frames_processed: int = 0
    duration_ms: int = 0
    average_form_score: float = 0.0
