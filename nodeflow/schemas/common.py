"""Common schemas used across the API."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessResponse(BaseModel):
    """Generic success response."""

    success: bool = True
    message: str | None = None


class ErrorResponse(BaseModel):
    """Generic error response."""

    success: bool = False
    error: str
    details: dict[str, Any] | None = None


class PaginatedResponse(CamelModel, Generic[T]):
    """Generic paginated response."""

    items: list[T]
    total: int
    page: int = Field(ge=1)
    page_size: int = Field(ge=1, le=100)
    total_pages: int
    has_next: bool
    has_prev: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str


class RootResponse(BaseModel):
    """Root endpoint response."""

    name: str
    version: str
    status: str
