import math

import pytest

from repcoach.models.frame_model import Frame, Landmark
from repcoach.utils.landmarks import PoseLandmark as P

SEGMENT = 0.2  # upper arm / forearm length in normalized units


def lm(x, y, z=0.0, visibility=0.99):
    return Landmark(x=x, y=y, z=z, visibility=visibility)


def make_frame(points, timestamp=0, confidence=0.9, filler=(0.5, 0.5)):
    """33-landmark frame; joints not in `points` sit at `filler`."""
    landmarks = [lm(*filler) for _ in range(33)]
    for idx, xy in points.items():
        landmarks[int(idx)] = lm(*xy)
    return Frame(landmarks=landmarks, confidence=confidence, timestamp=timestamp)


def arm(shoulder, upper_dir, elbow_angle, turn=1):
    """
    Elbow and wrist positions giving the requested shoulder-elbow-wrist angle.

    upper_dir is the unit direction shoulder -> elbow; turn flips which side
    the forearm swings to so left/right arms mirror each other.
    """
    sx, sy = shoulder
    ux, uy = upper_dir
    ex, ey = sx + SEGMENT * ux, sy + SEGMENT * uy
    bx, by = -ux, -uy
    t = math.radians(elbow_angle) * turn
    wx = bx * math.cos(t) - by * math.sin(t)
    wy = bx * math.sin(t) + by * math.cos(t)
    return (ex, ey), (ex + SEGMENT * wx, ey + SEGMENT * wy)


def pushup_frame(left_angle, timestamp=0, right_angle=None, hip_y=0.5, confidence=0.9):
    right_angle = left_angle if right_angle is None else right_angle
    ls, rs = (0.30, 0.50), (0.32, 0.50)
    le, lw = arm(ls, (0.0, 1.0), left_angle, turn=1)
    re, rw = arm(rs, (0.0, 1.0), right_angle, turn=-1)
    return make_frame(
        {
            P.LEFT_SHOULDER: ls, P.RIGHT_SHOULDER: rs,
            P.LEFT_ELBOW: le, P.RIGHT_ELBOW: re,
            P.LEFT_WRIST: lw, P.RIGHT_WRIST: rw,
            P.LEFT_HIP: (0.70, hip_y), P.RIGHT_HIP: (0.72, hip_y),
        },
        timestamp=timestamp,
        confidence=confidence,
    )


def chinup_frame(angle, timestamp=0, nose_y=0.30, hip_shift=0.0, confidence=0.9):
    ls, rs = (0.45, 0.40), (0.55, 0.40)
    le, lw = arm(ls, (0.0, -1.0), angle, turn=1)
    re, rw = arm(rs, (0.0, -1.0), angle, turn=-1)
    return make_frame(
        {
            P.NOSE: (0.50, nose_y),
            P.LEFT_SHOULDER: ls, P.RIGHT_SHOULDER: rs,
            P.LEFT_ELBOW: le, P.RIGHT_ELBOW: re,
            P.LEFT_WRIST: lw, P.RIGHT_WRIST: rw,
            P.LEFT_HIP: (0.45 + hip_shift, 0.70), P.RIGHT_HIP: (0.55 + hip_shift, 0.70),
        },
        timestamp=timestamp,
        confidence=confidence,
    )


def plank_frame(timestamp=0, hip_y=0.50, elbow_dx=0.0, confidence=0.9):
    """Side-on forearm plank; hip_y > 0.5 sags the hips, elbow_dx flares the left elbow."""
    return make_frame(
        {
            P.LEFT_SHOULDER: (0.30, 0.50), P.RIGHT_SHOULDER: (0.31, 0.50),
            P.LEFT_ELBOW: (0.30 + elbow_dx, 0.65), P.RIGHT_ELBOW: (0.31, 0.65),
            P.LEFT_WRIST: (0.42, 0.65), P.RIGHT_WRIST: (0.43, 0.65),
            P.LEFT_HIP: (0.55, hip_y), P.RIGHT_HIP: (0.56, hip_y),
            P.LEFT_KNEE: (0.68, 0.50), P.RIGHT_KNEE: (0.69, 0.50),
            P.LEFT_ANKLE: (0.80, 0.50), P.RIGHT_ANKLE: (0.81, 0.50),
        },
        timestamp=timestamp,
        confidence=confidence,
    )


@pytest.fixture
def hidden_wrist_frame():
    frame = pushup_frame(170)
    frame.landmarks[P.LEFT_WRIST] = lm(0.4, 0.7, visibility=0.2)
    return frame
