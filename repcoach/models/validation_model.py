from pydantic import BaseModel, Field
from typing import List


class ValidationResult(BaseModel):
    """
    Per-frame verdict handed to the session / game layer.

    - is_valid: majority-smoothed pass/fail over the last few frames
    - feedback: coaching strings in the order they were detected
    - completed_rep: True only on the frame that earned a rep or milestone
    - form_score: fraction of form criteria met on this frame
    """
    is_valid: bool = False
    feedback: List[str] = Field(default_factory=list)
    completed_rep: bool = False
    form_score: float = Field(default=0.0, ge=0.0, le=1.0)
