from typing import List, Literal, Optional

from pydantic import Field

from palm.schemas.base import RequestSchema, UtcDatetime

MealCategory = Literal['BREAKFAST', 'LUNCH', 'DINNER', 'SNACK']


class CreateMealRequest(RequestSchema):
    proteins_used: int = Field(0, ge=0)
    fats_used: int = Field(0, ge=0)
    carbs_used: int = Field(0, ge=0)
    veggies_used: int = Field(0, ge=0)
    junk_used: int = Field(0, ge=0)
    image: Optional[str] = Field(None, max_length=512)
    meal_category: Optional[MealCategory] = None
    date_time: Optional[UtcDatetime] = None
    notes: List[str] = Field(default_factory=list)


class UpdateMealRequest(RequestSchema):
    proteins_used: int = Field(None, ge=0)
    fats_used: int = Field(None, ge=0)
    carbs_used: int = Field(None, ge=0)
    veggies_used: int = Field(None, ge=0)
    junk_used: int = Field(None, ge=0)
    image: Optional[str] = Field(None, max_length=512)
    meal_category: Optional[MealCategory] = None
    date_time: UtcDatetime = None
    notes: List[str] = None
