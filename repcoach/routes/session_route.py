from fastapi import APIRouter, Depends, HTTPException

from repcoach.models.session_model import (
    CreateSessionRequest,
    FrameIn,
    FrameResponse,
    SessionSummary,
)
from repcoach.session.registry import SessionNotFoundError, SessionRegistry

router = APIRouter(prefix="/sessions")

_registry = SessionRegistry()


def get_registry() -> SessionRegistry:
    return _registry


def _lookup(fn, *args):
    try:
        return fn(*args)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown session: {args[0]}")


@router.post("", response_model=SessionSummary, status_code=201)
def create_session(
    body: CreateSessionRequest,
    registry: SessionRegistry = Depends(get_registry),
):
    return registry.create(body.exercise).summary()


@router.post("/{session_id}/frames", response_model=FrameResponse)
def submit_frame(
    session_id: str,
    frame: FrameIn,
    registry: SessionRegistry = Depends(get_registry),
):
    return _lookup(registry.submit, session_id, frame)


@router.get("/{session_id}", response_model=SessionSummary)
def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
):
    return _lookup(lambda sid: registry.get(sid).summary(), session_id)


@router.post("/{session_id}/reset", response_model=SessionSummary)
def reset_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
):
    return _lookup(registry.reset, session_id)


@router.delete("/{session_id}", response_model=SessionSummary)
def end_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
):
    return _lookup(registry.end, session_id)
