"""Uniform success envelope returned by every endpoint"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ServiceResponse(BaseModel, Generic[T]):
    success: bool
    message: Optional[str] = None
    data: Optional[T] = None
    id: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None, id: Optional[str] = None):
        return cls(success=True, message=message, data=data, id=id)
