from typing import List, Optional

from pydantic import Field

from palm.schemas.base import RequestSchema, UtcDatetime

HEX_COLOR_PATTERN = r'^#[0-9A-Fa-f]{6}$'


class CreateJournalEntryRequest(RequestSchema):
    text: str = Field(..., min_length=1, max_length=10000)
    date_time: Optional[UtcDatetime] = None
    tag_ids: List[int] = Field(default_factory=list)


class UpdateJournalEntryRequest(RequestSchema):
    text: str = Field(None, min_length=1, max_length=10000)
    date_time: UtcDatetime = None
    tag_ids: List[int] = None


class CreateTagRequest(RequestSchema):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field('#6366f1', pattern=HEX_COLOR_PATTERN)


class UpdateTagRequest(RequestSchema):
    name: str = Field(None, min_length=1, max_length=50)
    color: str = Field(None, pattern=HEX_COLOR_PATTERN)
