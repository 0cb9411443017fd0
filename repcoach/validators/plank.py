"""
plank.py - Plank hold validation & milestone tracking
=====================================================
Hold-based rather than angle-cyclic. A "rep" is a duration milestone;
each milestone fires once per session.
"""

import enum
from collections import deque

from repcoach.feedback.messages import FeedbackCatalog
from repcoach.models.frame_model import Frame
from repcoach.models.validation_model import ValidationResult
from repcoach.utils.geometry import are_aligned, body_angle, pose_stability
from repcoach.utils.landmarks import LandmarkMapper, PoseLandmark
from repcoach.utils.logger import debug, log
from repcoach.validators.core import ValidatorCore


class PlankPhase(str, enum.Enum):
    NOT_IN_POSITION = "Not In Position"
    HOLDING = "Holding"


class PlankValidator:
    """
    Validates plank form and tracks hold duration.

    Unlike push-ups and chin-ups, a frame is valid only if every criterion
    passes on its own; form_score still reports the fraction met.
    """

    # ===== CONFIGURATION =====
    MILESTONES_MS = (5000, 10000, 20000, 30000, 60000)
    LOST_DEBOUNCE_MS = 1000       # continuous invalidity before the hold drops
    ALIGNMENT_THRESHOLD = 0.1     # max hip distance from shoulder-ankle line
    MAX_BODY_DEVIATION = 30.0     # degrees from straight scoring 0
    ELBOW_OFFSET_THRESHOLD = 0.1  # elbow/shoulder horizontal gap scoring 0
    CRITERION_PASS = 0.7
    STABILITY_PASS = 0.7
    STABILITY_WINDOW = 10

    REQUIRED = (
        PoseLandmark.LEFT_SHOULDER, PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_ELBOW, PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.LEFT_WRIST, PoseLandmark.RIGHT_WRIST,
        PoseLandmark.LEFT_HIP, PoseLandmark.RIGHT_HIP,
        PoseLandmark.LEFT_KNEE, PoseLandmark.RIGHT_KNEE,
        PoseLandmark.LEFT_ANKLE, PoseLandmark.RIGHT_ANKLE,
    )

    def __init__(self):
        self.core = ValidatorCore()
        self.recent_frames = deque(maxlen=self.STABILITY_WINDOW)
        self.is_in_position = False
        self.position_start_time = 0
        self.duration = 0
        self.last_stable_time = 0
        self.next_milestone_index = 0
        self.messages = FeedbackCatalog(
            "plank",
            required=("alignment", "elbows", "hips", "stability", "started",
                      "holding", "milestone", "lost"),
        )

    @property
    def phase(self) -> PlankPhase:
        return PlankPhase.HOLDING if self.is_in_position else PlankPhase.NOT_IN_POSITION

    def validate(self, frame: Frame) -> ValidationResult:
        usable, rejected = self.core.screen(
            frame,
            self.REQUIRED,
            not_visible_text=self.messages.common_text("full_body_hidden"),
            low_confidence_text=self.messages.common_text("low_confidence"),
        )
        if not usable:
            debug(f"[PLANK] frame rejected t={frame.timestamp} conf={frame.confidence:.2f}")
            return rejected

        self.recent_frames.append(frame)

        m = LandmarkMapper(frame)
        shoulder_c = m.center("shoulder")
        hip_c = m.center("hip")
        ankle_c = m.center("ankle")

        alignment = self.check_body_alignment(shoulder_c, hip_c, ankle_c)
        elbows = self.check_elbow_position(m)
        hip = self.check_hip_position(shoulder_c, hip_c, ankle_c)
        stability = pose_stability(self.recent_frames)

        criteria = [
            alignment > self.CRITERION_PASS,
            elbows > self.CRITERION_PASS,
            hip > self.CRITERION_PASS,
            stability > self.STABILITY_PASS,
        ]
        form_score = self.core.form_score(criteria)
        is_valid = all(criteria)

        feedback = []
        if alignment <= self.CRITERION_PASS:
            feedback.append(self.messages.get("alignment"))
        if elbows <= self.CRITERION_PASS:
            feedback.append(self.messages.get("elbows"))
        if hip <= self.CRITERION_PASS:
            feedback.append(self.messages.get("hips"))
        if stability <= self.STABILITY_PASS:
            feedback.append(self.messages.get("stability"))

        completed_rep = self._track_hold(is_valid, frame.timestamp, feedback)

        return ValidationResult(
            is_valid=self.core.record_and_smooth(is_valid),
            feedback=feedback,
            completed_rep=completed_rep,
            form_score=form_score,
        )

    # -----------------------------------------------------
    # Hold tracking
    # -----------------------------------------------------

    def _track_hold(self, is_valid, now_ms, feedback) -> bool:
        if not is_valid:
            # Brief wobbles keep the hold; duration and milestones survive either way
            if self.is_in_position and now_ms - self.last_stable_time >= self.LOST_DEBOUNCE_MS:
                self.is_in_position = False
                log(f"[PLANK] hold lost t={now_ms} duration={self.duration}")
                feedback.append(self.messages.get("lost"))
            return False

        if not self.is_in_position:
            self.is_in_position = True
            self.position_start_time = now_ms
            self.last_stable_time = now_ms
            feedback.append(self.messages.get("started"))
            return False

        self.duration = now_ms - self.position_start_time
        self.last_stable_time = now_ms
        feedback.append(self.messages.get("holding", seconds=self.duration // 1000))

        if (self.next_milestone_index < len(self.MILESTONES_MS)
                and self.duration >= self.MILESTONES_MS[self.next_milestone_index]):
            reached = self.MILESTONES_MS[self.next_milestone_index]
            self.next_milestone_index += 1
            count = self.core.credit_rep()
            log(f"[PLANK] milestone={reached}ms count={count} t={now_ms}")
            feedback.append(self.messages.get("milestone", seconds=reached // 1000))
            return True

        return False

    # -----------------------------------------------------
    # Form checks
    # -----------------------------------------------------

    def _deviation_score(self, shoulder_c, hip_c, ankle_c) -> float:
        deviation = abs(180.0 - body_angle(shoulder_c, hip_c, ankle_c))
        return max(0.0, 1.0 - min(deviation / self.MAX_BODY_DEVIATION, 1.0))

    def check_body_alignment(self, shoulder_c, hip_c, ankle_c) -> float:
        """Shoulder, hip and ankle centres on one line; graded by hip angle otherwise."""
        if are_aligned([shoulder_c, hip_c, ankle_c], self.ALIGNMENT_THRESHOLD):
            return 1.0
        return self._deviation_score(shoulder_c, hip_c, ankle_c)

    def check_elbow_position(self, m: LandmarkMapper) -> float:
        """Elbows stacked under shoulders, averaged over both sides."""
        scores = []
        for shoulder, elbow in ((m.left("shoulder"), m.left("elbow")),
                                (m.right("shoulder"), m.right("elbow"))):
            offset = abs(elbow.x - shoulder.x)
            scores.append(max(0.0, 1.0 - offset / self.ELBOW_OFFSET_THRESHOLD))
        return sum(scores) / len(scores)

    def check_hip_position(self, shoulder_c, hip_c, ankle_c) -> float:
        """Sag or pike: deviation of the hip angle from a straight 180."""
        return self._deviation_score(shoulder_c, hip_c, ankle_c)

    # -----------------------------------------------------
    # Session-facing accessors
    # -----------------------------------------------------

    def reset(self) -> None:
        self.core.reset()
        self.recent_frames.clear()
        self.is_in_position = False
        self.position_start_time = 0
        self.duration = 0
        self.last_stable_time = 0
        self.next_milestone_index = 0

    def get_rep_count(self) -> int:
        return self.core.rep_count

    def get_current_phase(self) -> str:
        return self.phase.value

    def get_plank_duration(self) -> int:
        """Hold duration in ms as of the latest valid frame."""
        return self.duration

    def get_formatted_duration(self) -> str:
        total_seconds = self.duration // 1000
        return f"{total_seconds // 60:02d}:{total_seconds % 60:02d}"

    def is_in_plank(self) -> bool:
        return self.is_in_position

    def get_next_milestone_duration(self) -> int:
        """Next milestone in seconds; 0 once every milestone is reached."""
        if self.next_milestone_index >= len(self.MILESTONES_MS):
            return 0
        return self.MILESTONES_MS[self.next_milestone_index] // 1000
