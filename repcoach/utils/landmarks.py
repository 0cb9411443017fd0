import enum
from typing import List, Optional, Tuple

import numpy as np

from repcoach.models.frame_model import Frame, Landmark


class PoseLandmark(enum.IntEnum):
    """MediaPipe Pose indices. Fixed semantic slots; never renumber."""
    NOSE = 0
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28


# Landmarks whose frame-to-frame motion defines pose stability
STABILITY_KEYS = (
    PoseLandmark.LEFT_SHOULDER,
    PoseLandmark.RIGHT_SHOULDER,
    PoseLandmark.LEFT_ELBOW,
    PoseLandmark.RIGHT_ELBOW,
    PoseLandmark.LEFT_WRIST,
    PoseLandmark.RIGHT_WRIST,
    PoseLandmark.LEFT_HIP,
    PoseLandmark.RIGHT_HIP,
)


def get_landmark(landmarks: List[Optional[Landmark]], index: int) -> Optional[Landmark]:
    """Safe fetch: None for out-of-range slots or joints the provider dropped."""
    if not landmarks or index < 0 or index >= len(landmarks):
        return None
    return landmarks[index]


class LandmarkMapper:
    """
    Left/right view over one frame's landmarks.

    Validators only build a mapper after the frame passed screening, so every
    joint they ask for is present.
    """

    LEFT = {
        "shoulder": PoseLandmark.LEFT_SHOULDER,
        "elbow": PoseLandmark.LEFT_ELBOW,
        "wrist": PoseLandmark.LEFT_WRIST,
        "hip": PoseLandmark.LEFT_HIP,
        "knee": PoseLandmark.LEFT_KNEE,
        "ankle": PoseLandmark.LEFT_ANKLE,
    }

    RIGHT = {
        "shoulder": PoseLandmark.RIGHT_SHOULDER,
        "elbow": PoseLandmark.RIGHT_ELBOW,
        "wrist": PoseLandmark.RIGHT_WRIST,
        "hip": PoseLandmark.RIGHT_HIP,
        "knee": PoseLandmark.RIGHT_KNEE,
        "ankle": PoseLandmark.RIGHT_ANKLE,
    }

    def __init__(self, frame: Frame):
        self.landmarks = frame.landmarks

    # -----------------------------------------------------
    # Single joints
    # -----------------------------------------------------

    def get(self, index: int) -> Optional[Landmark]:
        return get_landmark(self.landmarks, index)

    def left(self, key: str) -> Landmark:
        return self._lookup(self.LEFT, key)

    def right(self, key: str) -> Landmark:
        return self._lookup(self.RIGHT, key)

    def _lookup(self, side, key):
        idx = side.get(key)
        if idx is None:
            raise KeyError(f"Invalid joint key: {key}")
        return self.get(idx)

    # -----------------------------------------------------
    # Bilateral pairs & centres
    # -----------------------------------------------------

    def pair(self, key: str) -> Tuple[Landmark, Landmark]:
        return self.left(key), self.right(key)

    def center(self, key: str) -> np.ndarray:
        """3D midpoint of the left/right joints, e.g. center("hip")."""
        l, r = self.pair(key)
        return np.array(
            [(l.x + r.x) / 2.0, (l.y + r.y) / 2.0, (l.z + r.z) / 2.0],
            float,
        )
