from pydantic import Field

from palm.schemas.base import RequestSchema


class CreatePlanRequest(RequestSchema):
    name: str = Field(..., min_length=1, max_length=255)
    protein_slots: int = Field(0, ge=0)
    fat_slots: int = Field(0, ge=0)
    carb_slots: int = Field(0, ge=0)
    veggie_slots: int = Field(0, ge=0)
    junk_slots: int = Field(0, ge=0)


class UpdatePlanRequest(RequestSchema):
    name: str = Field(None, min_length=1, max_length=255)
    protein_slots: int = Field(None, ge=0)
    fat_slots: int = Field(None, ge=0)
    carb_slots: int = Field(None, ge=0)
    veggie_slots: int = Field(None, ge=0)
    junk_slots: int = Field(None, ge=0)
