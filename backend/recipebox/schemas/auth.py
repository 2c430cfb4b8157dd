"""
RecipeBox Backend: Signup/Login Schemas
=========================================

Request fields are optional at the schema level: missing and
empty values must both reach UserService so that every violation is
reported in a single 400 response instead of FastAPI's per-type 422.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    name: Optional[str] = Field(default=None, json_schema_extra={"example": "Ada"})
    email: Optional[str] = Field(default=None, json_schema_extra={"example": "ada@example.com"})
    password: Optional[str] = Field(
        default=None,
        description="At least 6 characters",
        json_schema_extra={"example": "secret1"},
    )


class LoginRequest(BaseModel):
    email: Optional[str] = Field(default=None, json_schema_extra={"example": "ada@example.com"})
    password: Optional[str] = Field(default=None, json_schema_extra={"example": "secret1"})


class SignupResponse(BaseModel):
    id: int = Field(description="Generated user id")
    name: str
    email: str
    token: str = Field(description="Bearer token valid for one hour")


class TokenResponse(BaseModel):
    token: str = Field(description="Bearer token valid for one hour")
