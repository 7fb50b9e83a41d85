from typing import Literal

from pydantic import Field

from palm.schemas.base import RequestSchema, EMAIL_PATTERN


class CreateFollowRequestRequest(RequestSchema):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    type: Literal['FOLLOW', 'INVITE']
