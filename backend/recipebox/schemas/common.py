"""
RecipeBox Backend: Shared Response Schemas
============================================

Error bodies carry one short message, or a list of
field errors. Nothing else (no stack traces, no SQL) is ever returned.
"""

from typing import List

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str = Field(description="Human-readable error message")


class FieldErrorItem(BaseModel):
    type: str = Field(default="field")
    msg: str = Field(description="What is wrong with the field")
    path: str = Field(description="Name of the offending field")
    location: str = Field(default="body", description="body, path or query")


class ValidationErrorResponse(BaseModel):
    errors: List[FieldErrorItem] = Field(description="One entry per invalid field")


class MessageResponse(BaseModel):
    message: str
