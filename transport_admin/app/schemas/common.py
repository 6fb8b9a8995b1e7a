"""
Shared response envelope and base models.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: {"success": true, "data": ..., "message": ...}."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class CamelModel(BaseModel):
    """Serializes field names as camelCase (tripStats, thisMonthPaid, ...)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
