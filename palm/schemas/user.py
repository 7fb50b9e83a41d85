from typing import Optional

from pydantic import Field

from palm.schemas.base import RequestSchema, EMAIL_PATTERN


class RegisterRequest(RequestSchema):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8, max_length=128)
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)


class LoginRequest(RequestSchema):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UpdateUserRequest(RequestSchema):
    first_name: str = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)


class UpdateSharingRequest(RequestSchema):
    sharing_enabled: bool
