"""
pushup.py - Push-up form validation & rep counting
==================================================
Elbow angle drives the cycle: bent below DOWN_ANGLE, locked out above
UP_ANGLE. A rep is credited on the DOWN -> UP transition.
"""

import enum

from repcoach.feedback.messages import FeedbackCatalog
from repcoach.models.frame_model import Frame
from repcoach.models.validation_model import ValidationResult
from repcoach.utils.geometry import angle
from repcoach.utils.landmarks import LandmarkMapper, PoseLandmark
from repcoach.utils.logger import debug, log
from repcoach.validators.core import ValidatorCore


class PushUpPhase(str, enum.Enum):
    TRANSITIONING = "Transitioning"
    DOWN = "Down Position"
    UP = "Up Position"


class PushUpValidator:
    """Validates push-up form and counts repetitions."""

    # ===== CONFIGURATION =====
    DOWN_ANGLE = 70.0             # average elbow angle below this = bottom
    UP_ANGLE = 160.0              # average elbow angle above this = lockout
    ANGLE_RANGE = (30.0, 180.0)   # open interval of plausible elbow angles
    ALIGNMENT_THRESHOLD = 0.1     # shoulder/hip vertical offset giving score 0
    SYMMETRY_MAX_DIFF = 30.0      # left/right angle gap giving score 0
    CRITERION_PASS = 0.7
    VALID_FORM_SCORE = 0.6
    MIN_REP_INTERVAL_MS = 1000

    REQUIRED = (
        PoseLandmark.LEFT_SHOULDER, PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_ELBOW, PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.LEFT_WRIST, PoseLandmark.RIGHT_WRIST,
        PoseLandmark.LEFT_HIP, PoseLandmark.RIGHT_HIP,
    )

    def __init__(self):
        self.core = ValidatorCore()
        self.phase = PushUpPhase.TRANSITIONING
        self.messages = FeedbackCatalog(
            "pushup",
            required=("alignment", "symmetry", "down_reached", "rep_completed",
                      "lower_down", "push_up", "keep_going"),
        )

    def validate(self, frame: Frame) -> ValidationResult:
        usable, rejected = self.core.screen(
            frame,
            self.REQUIRED,
            not_visible_text=self.messages.common_text("upper_body_hidden"),
            low_confidence_text=self.messages.common_text("low_confidence"),
        )
        if not usable:
            debug(f"[PUSHUP] frame rejected t={frame.timestamp} conf={frame.confidence:.2f}")
            return rejected

        m = LandmarkMapper(frame)
        left_angle = angle(m.left("shoulder"), m.left("elbow"), m.left("wrist"))
        right_angle = angle(m.right("shoulder"), m.right("elbow"), m.right("wrist"))
        avg_angle = (left_angle + right_angle) / 2.0

        alignment = self.check_body_alignment(m)
        symmetry = self.check_arm_symmetry(left_angle, right_angle)

        criteria = [
            alignment > self.CRITERION_PASS,
            symmetry > self.CRITERION_PASS,
            self.ANGLE_RANGE[0] < avg_angle < self.ANGLE_RANGE[1],
        ]
        form_score = self.core.form_score(criteria)
        is_valid = form_score > self.VALID_FORM_SCORE

        feedback = []
        if alignment <= self.CRITERION_PASS:
            feedback.append(self.messages.get("alignment"))
        if symmetry <= self.CRITERION_PASS:
            feedback.append(self.messages.get("symmetry"))

        completed_rep = self._advance_phase(avg_angle, is_valid, frame.timestamp, feedback)

        # Guidance for the position the user is in right now
        if is_valid:
            if avg_angle > self.UP_ANGLE:
                feedback.append(self.messages.get("lower_down"))
            elif avg_angle < self.DOWN_ANGLE:
                feedback.append(self.messages.get("push_up"))
            else:
                feedback.append(self.messages.get("keep_going"))

        return ValidationResult(
            is_valid=self.core.record_and_smooth(is_valid),
            feedback=feedback,
            completed_rep=completed_rep,
            form_score=form_score,
        )

    # -----------------------------------------------------
    # Phase machine
    # -----------------------------------------------------

    def _advance_phase(self, avg_angle, is_valid, now_ms, feedback) -> bool:
        if not is_valid:
            return False

        if avg_angle < self.DOWN_ANGLE and self.phase != PushUpPhase.DOWN:
            self.phase = PushUpPhase.DOWN
            feedback.append(self.messages.get("down_reached"))
            return False

        if avg_angle > self.UP_ANGLE and self.phase == PushUpPhase.DOWN:
            self.phase = PushUpPhase.UP
            if not self.core.time_gate_elapsed(now_ms, self.MIN_REP_INTERVAL_MS):
                # Too fast after the previous rep: lockout seen, no credit
                debug(f"[PUSHUP] rep not credited t={now_ms} last={self.core.last_event_timestamp}")
                return False
            count = self.core.credit_rep()
            log(f"[PUSHUP] rep={count} angle={avg_angle:.1f} t={now_ms}")
            feedback.append(self.messages.get("rep_completed", count=count))
            return True

        return False

    # -----------------------------------------------------
    # Form checks
    # -----------------------------------------------------

    def check_body_alignment(self, m: LandmarkMapper) -> float:
        """1.0 when shoulder and hip centres sit at the same height."""
        offset = abs(m.center("shoulder")[1] - m.center("hip")[1])
        return min(1.0, max(0.0, 1.0 - offset / self.ALIGNMENT_THRESHOLD))

    def check_arm_symmetry(self, left_angle: float, right_angle: float) -> float:
        diff = abs(left_angle - right_angle)
        return min(1.0, max(0.0, 1.0 - diff / self.SYMMETRY_MAX_DIFF))

    # -----------------------------------------------------
    # Session-facing accessors
    # -----------------------------------------------------

    def reset(self) -> None:
        self.core.reset()
        self.phase = PushUpPhase.TRANSITIONING

    def get_rep_count(self) -> int:
        return self.core.rep_count

    def get_current_phase(self) -> str:
        return self.phase.value
