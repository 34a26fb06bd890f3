"""Base schema and shared response envelope"""
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")

# スラッグの許容文字
SLUG_PATTERN = r"^[a-z0-9-]+$"


class BaseSchema(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ApiResponse(BaseSchema, Generic[DataT]):
    """Envelope shared by every JSON response"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class Pagination(BaseSchema):
    """Pagination block for list responses"""
    current: int
    pages: int
    total: int
    limit: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = (total + limit - 1) // limit
        return cls(
            current=page,
            pages=pages,
            total=total,
            limit=limit,
            has_next=page < pages,
            has_prev=page > 1,
        )


def blank_to_none(value):
    """空文字のクエリ（?status= など）は未指定として扱う"""
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


# クエリパラメータ用: Annotated[Optional[T], BlankAsNone, Query(...)]
BlankAsNone = BeforeValidator(blank_to_none)
