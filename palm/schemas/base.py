from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict

from palm.utils import to_naive_utc

# Accepts ISO-8601 with or without an offset; stored as naive UTC
UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]

EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'


class RequestSchema(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    def changes(self):
        """Fields the client actually sent, for partial updates"""
        return self.model_dump(exclude_unset=True)
