"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class FieldError(BaseModel):
    """A single failed constraint."""

    field: str | None = None
    message: str


class ApiResponse(BaseModel, Generic[DataT]):
    """Standard response envelope."""

    success: bool = True
    message: str
    data: DataT | None = None
    errors: list[FieldError] | None = None
