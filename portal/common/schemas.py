"""
This module defines common Pydantic models used across multiple portal modules.
"""

from datetime import datetime
from typing import Optional, Dict, List

from pydantic import BaseModel, field_validator, field_serializer


class TimestampMixin:
    """
    A mixin that adds created and updated timestamp fields to models.
    Firestore hands back timezone-aware datetimes; ISO strings are accepted too.
    """
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @field_validator('createdAt', 'updatedAt', mode='before')
    @classmethod
    def parse_datetime(cls, value):
        if value is None or isinstance(value, datetime):
            return value

        if isinstance(value, str):
            try:
                # fromisoformat only understands a trailing "Z" from 3.11 on
                return datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                pass

        # Let Pydantic report anything we could not parse
        return value

    @field_serializer('createdAt', 'updatedAt')
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        """Serialize datetime to ISO format string."""
        return value.isoformat() if value else None


class MessageResponse(BaseModel):
    """
    Plain confirmation or error body.
    """
    message: str


class ErrorResponse(MessageResponse):
    """
    Error body; ``errors`` maps field names to messages for validation failures.
    """
    errors: Optional[Dict[str, List[str]]] = None


class SuccessResponse(BaseModel):
    success: bool = True
