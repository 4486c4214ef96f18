from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PageMeta(BaseSchema):
    total: int
    limit: int
    offset: int


class Envelope(BaseSchema, Generic[T]):
    """Standard success envelope"""
    success: bool = True
    data: T
    message: Optional[str] = None


class PagedEnvelope(BaseSchema, Generic[T]):
    success: bool = True
    data: List[T]
    meta: PageMeta


class ErrorResponse(BaseSchema):
    success: bool = False
    message: str
    details: Optional[Any] = None
