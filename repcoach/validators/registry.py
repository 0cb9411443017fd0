from typing import Protocol, Union

from repcoach.models.exercise_model import ExerciseType
from repcoach.models.frame_model import Frame
from repcoach.models.validation_model import ValidationResult
from repcoach.validators.chinup import ChinUpValidator
from repcoach.validators.plank import PlankValidator
from repcoach.validators.pushup import PushUpValidator


class ExerciseValidator(Protocol):
    """What the session layer relies on; each validator satisfies it structurally."""

    def validate(self, frame: Frame) -> ValidationResult: ...

    def reset(self) -> None: ...

    def get_rep_count(self) -> int: ...

    def get_current_phase(self) -> str: ...


class UnknownExerciseError(ValueError):
    pass


VALIDATORS = {
    ExerciseType.PUSHUP: PushUpValidator,
    ExerciseType.CHINUP: ChinUpValidator,
    ExerciseType.PLANK: PlankValidator,
}


def create_validator(exercise: Union[ExerciseType, str]) -> ExerciseValidator:
    """Fresh, independent validator for one exercise."""
    try:
        key = ExerciseType(exercise)
    except ValueError:
        raise UnknownExerciseError(f"Unsupported exercise: {exercise!r}") from None
    return VALIDATORS[key]()
