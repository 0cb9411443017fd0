import enum


class ExerciseType(str, enum.Enum):
    """Exercises the engine can validate. The caller picks one per session."""
    PUSHUP = "pushup"
    CHINUP = "chinup"
    PLANK = "plank"
