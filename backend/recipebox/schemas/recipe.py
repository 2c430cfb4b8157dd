"""
RecipeBox Backend: Recipe Request/Response Schemas
====================================================

What:  API contract for /recipes. JSON keys are camelCase (imageUrl,
       categoryId, userId, createdAt); Python attributes stay snake_case.
How:   alias_generator=to_camel on every model. populate_by_name lets
       services build responses from ORM attributes, and lets clients send
       either spelling.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Signed 64-bit range of an SQL INTEGER column; the SQLite driver rejects
# anything wider before the query runs
MIN_SQL_INTEGER = -(2**63)
MAX_SQL_INTEGER = 2**63 - 1


class RecipeInput(BaseModel):
    """
    Body of POST /recipes and PUT /recipes/{id}.

    Required-ness is checked by RecipeService.create (all four text fields
    non-empty); PUT accepts the same shape without that check.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = Field(default=None, json_schema_extra={"example": "Soup"})
    description: Optional[str] = Field(default=None, json_schema_extra={"example": "hot"})
    ingredients: Optional[str] = Field(default=None, json_schema_extra={"example": "water"})
    instructions: Optional[str] = Field(default=None, json_schema_extra={"example": "boil"})
    category_id: Optional[int] = Field(
        default=None,
        ge=MIN_SQL_INTEGER,
        le=MAX_SQL_INTEGER,
        description="Unvalidated category reference",
    )
    image_url: Optional[str] = Field(default=None, description="Usually an imageUrl from POST /upload")


class RecipeResponse(BaseModel):
    """A recipe exactly as stored, including generated id, owner and timestamp."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    title: str
    description: str
    ingredients: str
    instructions: str
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    user_id: int
    created_at: datetime
