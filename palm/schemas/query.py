from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100
MAX_PAGE = 100000


class PageQuery(BaseModel):
    model_config = ConfigDict(extra='ignore')

    page: int = Field(1, ge=1, le=MAX_PAGE)
    # Oversized limits are clamped rather than rejected
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1)

    def clamped_limit(self):
        return min(self.limit, MAX_PAGE_SIZE)
