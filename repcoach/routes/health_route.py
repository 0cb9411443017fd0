from fastapi import APIRouter

from repcoach.models.exercise_model import ExerciseType

router = APIRouter()


@router.get("/health")
def health():
    return {
        "status": "ok",
        "exercises": [e.value for e in ExerciseType],
    }
