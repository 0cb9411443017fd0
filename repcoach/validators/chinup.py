"""
chinup.py - Chin-up form validation & rep counting
==================================================
Mirror of the push-up cycle: a dead hang (wide elbow angle) is DOWN, a
bent arm with the chin above the hands is UP, and the rep is credited
when the user returns to the hang.
"""

import enum

from repcoach.feedback.messages import FeedbackCatalog
from repcoach.models.frame_model import Frame, Landmark
from repcoach.models.validation_model import ValidationResult
from repcoach.utils.geometry import angle
from repcoach.utils.landmarks import LandmarkMapper, PoseLandmark
from repcoach.utils.logger import debug, log
from repcoach.validators.core import ValidatorCore


class ChinUpPhase(str, enum.Enum):
    TRANSITIONING = "Transitioning"
    DOWN = "Down Position"
    UP = "Up Position"


class ChinUpValidator:
    """Validates chin-up form and counts repetitions."""

    # ===== CONFIGURATION =====
    HANG_ANGLE = 130.0            # average elbow angle above this = dead hang
    TOP_ANGLE = 70.0              # average elbow angle below this = top
    ANGLE_RANGE = (30.0, 180.0)
    CHIN_CLEARANCE = 0.05         # nose-above-wrists distance scoring 1.0
    CHIN_PASS = 0.7
    SWING_THRESHOLD = 0.1         # shoulder/hip horizontal drift scoring 0
    SYMMETRY_MAX_DIFF = 30.0
    CRITERION_PASS = 0.7
    VALID_FORM_SCORE = 0.6
    MIN_REP_INTERVAL_MS = 1000

    REQUIRED = (
        PoseLandmark.NOSE,
        PoseLandmark.LEFT_SHOULDER, PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_ELBOW, PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.LEFT_WRIST, PoseLandmark.RIGHT_WRIST,
        PoseLandmark.LEFT_HIP, PoseLandmark.RIGHT_HIP,
    )

    def __init__(self):
        self.core = ValidatorCore()
        self.phase = ChinUpPhase.TRANSITIONING
        self.messages = FeedbackCatalog(
            "chinup",
            required=("swinging", "symmetry", "start_reached", "chin_over_bar",
                      "rep_completed", "pull_up", "lower_down", "keep_going"),
        )

    def validate(self, frame: Frame) -> ValidationResult:
        usable, rejected = self.core.screen(
            frame,
            self.REQUIRED,
            not_visible_text=self.messages.common_text("upper_body_hidden"),
            low_confidence_text=self.messages.common_text("low_confidence"),
        )
        if not usable:
            debug(f"[CHINUP] frame rejected t={frame.timestamp} conf={frame.confidence:.2f}")
            return rejected

        m = LandmarkMapper(frame)
        left_angle = angle(m.left("shoulder"), m.left("elbow"), m.left("wrist"))
        right_angle = angle(m.right("shoulder"), m.right("elbow"), m.right("wrist"))
        avg_angle = (left_angle + right_angle) / 2.0

        body_position = self.check_body_position(m)
        symmetry = self.check_arm_symmetry(left_angle, right_angle)
        chin = self.check_chin_over_bar(
            m.get(PoseLandmark.NOSE), m.left("wrist"), m.right("wrist")
        )

        criteria = [
            body_position > self.CRITERION_PASS,
            symmetry > self.CRITERION_PASS,
            self.ANGLE_RANGE[0] < avg_angle < self.ANGLE_RANGE[1],
        ]
        form_score = self.core.form_score(criteria)
        is_valid = form_score > self.VALID_FORM_SCORE

        feedback = []
        if body_position <= self.CRITERION_PASS:
            feedback.append(self.messages.get("swinging"))
        if symmetry <= self.CRITERION_PASS:
            feedback.append(self.messages.get("symmetry"))

        is_hanging = avg_angle > self.HANG_ANGLE
        is_top = avg_angle < self.TOP_ANGLE and chin > self.CHIN_PASS
        completed_rep = False

        if is_hanging and self.phase == ChinUpPhase.TRANSITIONING:
            self.phase = ChinUpPhase.DOWN
            feedback.append(self.messages.get("start_reached"))
        elif is_top and is_valid and self.phase == ChinUpPhase.DOWN:
            self.phase = ChinUpPhase.UP
            feedback.append(self.messages.get("chin_over_bar"))
        elif is_hanging and is_valid and self.phase == ChinUpPhase.UP:
            self.phase = ChinUpPhase.DOWN
            if self.core.time_gate_elapsed(frame.timestamp, self.MIN_REP_INTERVAL_MS):
                count = self.core.credit_rep()
                completed_rep = True
                log(f"[CHINUP] rep={count} angle={avg_angle:.1f} t={frame.timestamp}")
                feedback.append(self.messages.get("rep_completed", count=count))
            else:
                debug(f"[CHINUP] rep not credited t={frame.timestamp} last={self.core.last_event_timestamp}")

        if is_valid:
            if avg_angle > self.HANG_ANGLE:
                feedback.append(self.messages.get("pull_up"))
            elif avg_angle < self.TOP_ANGLE:
                feedback.append(self.messages.get("lower_down"))
            else:
                feedback.append(self.messages.get("keep_going"))

        return ValidationResult(
            is_valid=self.core.record_and_smooth(is_valid),
            feedback=feedback,
            completed_rep=completed_rep,
            form_score=form_score,
        )

    # -----------------------------------------------------
    # Form checks
    # -----------------------------------------------------

    def check_body_position(self, m: LandmarkMapper) -> float:
        """Penalizes horizontal drift of shoulders over hips (kipping/swing)."""
        drift = abs(m.center("shoulder")[0] - m.center("hip")[0])
        return min(1.0, max(0.0, 1.0 - drift / self.SWING_THRESHOLD))

    def check_arm_symmetry(self, left_angle: float, right_angle: float) -> float:
        diff = abs(left_angle - right_angle)
        return min(1.0, max(0.0, 1.0 - diff / self.SYMMETRY_MAX_DIFF))

    def check_chin_over_bar(self, nose: Landmark, left_wrist: Landmark, right_wrist: Landmark) -> float:
        """
        Graded chin-over-bar score using the wrists as the bar line.

        0 while the nose is level with or below the wrists (image y grows
        downward); otherwise clearance / CHIN_CLEARANCE, saturating at 1.
        """
        bar_y = (left_wrist.y + right_wrist.y) / 2.0
        if nose.y >= bar_y:
            return 0.0
        return min(1.0, (bar_y - nose.y) / self.CHIN_CLEARANCE)

    # -----------------------------------------------------
    # Session-facing accessors
    # -----------------------------------------------------

    def reset(self) -> None:
        self.core.reset()
        self.phase = ChinUpPhase.TRANSITIONING

    def get_rep_count(self) -> int:
        return self.core.rep_count

    def get_current_phase(self) -> str:
        return self.phase.value
