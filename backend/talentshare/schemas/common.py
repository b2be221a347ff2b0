"""
Response envelopes shared by every endpoint.

Success: {"success": true, "data": ...}
Failure: {"success": false, "error": "...", "code": "..."} (see api/errors.py)
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ListEnvelope(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: list[T]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
    data: dict = {}


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str
    details: Optional[Any] = None
