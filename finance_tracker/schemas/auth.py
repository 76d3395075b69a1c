"""
Pydantic schemas for registration and login.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class UserCredentials(BaseModel):
    """Body of both /register and /login."""
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=128)


class UserResponse(BaseModel):
    id: int
    username: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    user: UserResponse


class LoginResponse(BaseModel):
    user: UserResponse
    token: str
    token_type: str = "bearer"
