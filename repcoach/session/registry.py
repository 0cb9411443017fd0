from typing import Dict, List, Optional

from repcoach.models.session_model import FrameIn, FrameResponse, SessionSummary
from repcoach.session.workout_session import WorkoutSession
from repcoach.utils.clock import Clock, SystemClock
from repcoach.utils.logger import log


class SessionNotFoundError(KeyError):
    pass


class SessionRegistry:
    """
    Live sessions keyed by id. Nothing survives a restart.

    The clock stamps frames that arrive without a timestamp and drives the
    idle cutoff: a session untouched for IDLE_TIMEOUT_MS is dropped on the
    next registry call.
    """

    # ===== CONFIGURATION =====
    IDLE_TIMEOUT_MS = 30 * 60 * 1000

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self.sessions: Dict[str, WorkoutSession] = {}
        self.last_seen: Dict[str, int] = {}

    def expire_idle(self) -> List[str]:
        now = self.clock.now_ms()
        expired = [
            sid for sid, seen in self.last_seen.items()
            if now - seen >= self.IDLE_TIMEOUT_MS
        ]
        for sid in expired:
            idle_ms = now - self.last_seen.pop(sid)
            del self.sessions[sid]
            log(f"[SESSION] expired {sid} idle_ms={idle_ms}")
        return expired

    def create(self, exercise) -> WorkoutSession:
        self.expire_idle()
        session = WorkoutSession(exercise)
        self.sessions[session.session_id] = session
        self.last_seen[session.session_id] = self.clock.now_ms()
        log(f"[SESSION] started {session.session_id} exercise={session.exercise.value}")
        return session

    def get(self, session_id: str) -> WorkoutSession:
        self.expire_idle()
        try:
            session = self.sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        self.last_seen[session_id] = self.clock.now_ms()
        return session

    def submit(self, session_id: str, frame_in: FrameIn) -> FrameResponse:
        session = self.get(session_id)
        result = session.process(frame_in.to_frame(self.clock.now_ms()))
        return FrameResponse(
            **result.model_dump(),
            rep_count=session.validator.get_rep_count(),
            phase=session.validator.get_current_phase(),
        )

    def reset(self, session_id: str) -> SessionSummary:
        session = self.get(session_id)
        session.reset()
        return session.summary()

    def end(self, session_id: str) -> SessionSummary:
        session = self.get(session_id)
        del self.sessions[session_id]
        del self.last_seen[session_id]
        summary = session.summary()
        log(
            f"[SESSION] ended {session_id} reps={summary.total_reps} "
            f"duration_ms={summary.duration_ms}"
        )
        return summary
