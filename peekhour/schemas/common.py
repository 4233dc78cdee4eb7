# peekhour/schemas/common.py
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class Pagination(BaseModel):
    total: int
    page: int
    size: int
    total_pages: int
