from typing import Literal, Optional

from pydantic import Field

from palm.schemas.base import RequestSchema, UtcDatetime

WaterUnit = Literal['FLUID_OUNCES', 'GLASSES', 'CUPS', 'LITERS', 'MILLILITERS']


class CreateWaterRequest(RequestSchema):
    amount: float = Field(..., gt=0)
    unit: WaterUnit = 'FLUID_OUNCES'
    date_time: Optional[UtcDatetime] = None
    notes: Optional[str] = Field(None, max_length=500)


class UpdateWaterRequest(RequestSchema):
    amount: float = Field(None, gt=0)
    unit: WaterUnit = None
    date_time: UtcDatetime = None
    notes: Optional[str] = Field(None, max_length=500)


class CreateWaterPlanRequest(RequestSchema):
    name: str = Field(..., min_length=1, max_length=255)
    daily_target: float = Field(64, ge=0)
    unit: WaterUnit = 'FLUID_OUNCES'


class UpdateWaterPlanRequest(RequestSchema):
    name: str = Field(None, min_length=1, max_length=255)
    daily_target: float = Field(None, ge=0)
    unit: WaterUnit = None
