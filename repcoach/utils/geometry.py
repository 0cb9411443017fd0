# repcoach/utils/geometry.py
"""
Stateless geometry over pose landmarks.

Every helper accepts a Landmark, a numpy array or a plain (x, y[, z])
tuple. Angles and line distances are measured in the image plane (x, y);
monocular z is too noisy to judge form with.
"""

import numpy as np

from repcoach.utils.landmarks import STABILITY_KEYS, get_landmark


# -----------------------------------------------------------
# COORDINATE COERCION
# -----------------------------------------------------------

def _xyz(p):
    if hasattr(p, "x"):
        return np.array([p.x, p.y, getattr(p, "z", 0.0) or 0.0], float)
    arr = np.asarray(p, float)
    if arr.shape[0] == 2:
        arr = np.append(arr, 0.0)
    return arr


def _xy(p):
    return _xyz(p)[:2]


def _cross2(u, v):
    return float(u[0] * v[1] - u[1] * v[0])


# -----------------------------------------------------------
# PRIMITIVES
# -----------------------------------------------------------

def angle(a, b, c):
    """
    Angle ABC (vertex at B) in degrees, 0-180.

    Zero-length arms return 0.0 instead of NaN.
    """
    ba = _xy(a) - _xy(b)
    bc = _xy(c) - _xy(b)
    denom = np.linalg.norm(ba) * np.linalg.norm(bc)
    if denom == 0:
        return 0.0
    cosang = float(np.dot(ba, bc) / denom)
    cosang = max(-1.0, min(1.0, cosang))
    return float(np.degrees(np.arccos(cosang)))


def distance(a, b):
    """Euclidean distance in normalized 3D space."""
    return float(np.linalg.norm(_xyz(a) - _xyz(b)))


def body_angle(shoulder, hip, ankle):
    """Angle at the hip; 180 means shoulder, hip and ankle form a straight line."""
    return angle(shoulder, hip, ankle)


def point_to_line_distance(p, seg_start, seg_end):
    """
    Distance from p to the closest point of segment [seg_start, seg_end].
    """
    pt = _xy(p)
    s = _xy(seg_start)
    d = _xy(seg_end) - s

    len_sq = float(np.dot(d, d))
    if len_sq == 0:
        return float(np.linalg.norm(pt - s))

    t = float(np.dot(pt - s, d) / len_sq)
    t = max(0.0, min(1.0, t))
    return float(np.linalg.norm(pt - (s + t * d)))


def are_aligned(points, threshold=0.05):
    """
    True if every interior point lies within `threshold` of the line through
    the first and last points.
    """
    pts = [_xy(p) for p in points]
    if len(pts) < 3:
        return True

    origin = pts[0]
    direction = pts[-1] - origin

    if not np.any(direction):
        # Coincident endpoints: take the line towards the farthest point
        far = max(pts[1:-1], key=lambda q: np.linalg.norm(q - origin))
        direction = far - origin
        if not np.any(direction):
            return True

    length = float(np.linalg.norm(direction))
    for q in pts[1:-1]:
        if abs(_cross2(direction, q - origin)) / length > threshold:
            return False
    return True


# -----------------------------------------------------------
# MULTI-FRAME STABILITY
# -----------------------------------------------------------

def _frame_landmarks(frame):
    return getattr(frame, "landmarks", frame)


def pose_stability(frame_history, keys=STABILITY_KEYS):
    """
    Stability score in [0, 1] from recent frames.

    Mean planar displacement of the key joints between consecutive frames,
    mapped through max(0, 1 - mean * 10). Returns 0.0 until at least two
    consecutive pairs share a visible key joint.
    """
    total = 0.0
    comparisons = 0
    usable_pairs = 0

    history = list(frame_history)
    for prev, curr in zip(history, history[1:]):
        prev_lm = _frame_landmarks(prev)
        curr_lm = _frame_landmarks(curr)
        if not prev_lm or not curr_lm:
            continue

        pair_used = False
        for idx in keys:
            a = get_landmark(prev_lm, idx)
            b = get_landmark(curr_lm, idx)
            if a is None or b is None:
                continue
            total += float(np.hypot(b.x - a.x, b.y - a.y))
            comparisons += 1
            pair_used = True

        if pair_used:
            usable_pairs += 1

    if usable_pairs < 2:
        return 0.0

    mean_move = total / comparisons
    return max(0.0, min(1.0, 1.0 - mean_move * 10.0))
