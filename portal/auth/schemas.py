"""
This module defines the Pydantic models used for authentication.
"""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """
    Represents the request data for the shared-credential login.
    """
    username: str
    password: str
