"""
Auth request/response schemas.

Validation rules follow the sign-in/sign-up forms: valid email, password of
at least 6 characters, full name of at least 2 characters.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SignInRequest(BaseModel):
    email: EmailStr = Field(description="Account email")
    password: str = Field(min_length=6, description="Password (min 6 chars)")


class SignUpRequest(SignInRequest):
    full_name: str = Field(min_length=2, max_length=200, description="Display name")


class IdentityResponse(BaseModel):
    id: uuid.UUID
    email: str
    full_name: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    """Returned by sign-in and sign-up."""
    access_token: str = Field(description="JWT bearer token")
    token_type: str = Field(default="bearer")
    expires_at: datetime
    user: IdentityResponse
