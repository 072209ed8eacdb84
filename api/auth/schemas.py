"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints

Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


class SignupRequest(BaseModel):
    username: Username
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=100)
    remember_me: bool = Field(default=False, alias="rememberMe")

    model_config = {"populate_by_name": True}


class PublicUserResponse(BaseModel):
    id: int
    username: str


class UserResponse(PublicUserResponse):
    # Never carries the password or its hash.
    email: str
