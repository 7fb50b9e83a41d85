from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from palm.schemas.base import RequestSchema, UtcDatetime

ExerciseCategory = Literal['LOWER_BODY_GLUTES', 'UPPER_BODY_CORE', 'FULL_BODY_CARDIO']


class CreateExerciseRequest(RequestSchema):
    name: str = Field(..., min_length=1, max_length=255)
    category: ExerciseCategory
    unit: str = Field('reps', min_length=1, max_length=50)


class UpdateExerciseRequest(RequestSchema):
    name: str = Field(None, min_length=1, max_length=255)
    category: ExerciseCategory = None
    unit: str = Field(None, min_length=1, max_length=50)


class ExerciseTarget(BaseModel):
    exercise_id: int
    daily_target: int = Field(..., ge=0)


class ExerciseCompleted(BaseModel):
    exercise_id: int
    completed: int = Field(..., ge=0)


class CreateWorkoutPlanRequest(RequestSchema):
    name: str = Field(..., min_length=1, max_length=255)
    exercises: List[ExerciseTarget] = Field(default_factory=list)


class UpdateWorkoutPlanRequest(RequestSchema):
    name: str = Field(None, min_length=1, max_length=255)
    exercises: List[ExerciseTarget] = None


class CreateWorkoutRequest(RequestSchema):
    date_time: Optional[UtcDatetime] = None
    notes: Optional[str] = Field(None, max_length=1000)
    exercises: List[ExerciseCompleted] = Field(..., min_length=1)


class UpdateWorkoutRequest(RequestSchema):
    date_time: UtcDatetime = None
    notes: Optional[str] = Field(None, max_length=1000)
    exercises: List[ExerciseCompleted] = None
