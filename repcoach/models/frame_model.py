from pydantic import BaseModel, Field
from typing import List, Optional

MAX_LANDMARKS = 33


class Landmark(BaseModel):
    # Normalized image coordinates; z is relative depth from the provider
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None


class Frame(BaseModel):
    """
    One timestamped pose snapshot from the upstream pose provider.

    landmarks[i] is always MediaPipe landmark i; a provider that lost a
    joint sends None in its slot rather than shortening the list.
    """
    landmarks: List[Optional[Landmark]] = Field(default_factory=list, max_length=MAX_LANDMARKS)
    confidence: float = 0.0
    timestamp: int = 0
