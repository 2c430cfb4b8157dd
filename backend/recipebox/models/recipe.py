"""
RecipeBox Backend: Recipe SQLAlchemy Model
============================================

What:  ORM model for the `recipes` table.
Who:   Read and written exclusively by RecipeService, always filtered by
       user_id of the authenticated caller.

Table Design:
    - ingredients / instructions: free text, opaque to the store
    - image_url: nullable, usually an imageUrl returned by POST /upload
    - category_id: nullable integer with no foreign-key constraint; the
      service never checks that the category exists or belongs to the caller
    - user_id: required owner; indexed because every query filters on it

Lifecycle:
    1. Created by POST /recipes
    2. Mutable fields overwritten by PUT /recipes/{id}
    3. Never deleted
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from recipebox.database import Base

# Columns overwritten by an update, in the order clients send them
MUTABLE_FIELDS = (
    "title",
    "description",
    "ingredients",
    "instructions",
    "category_id",
    "image_url",
)


class Recipe(Base):
    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    ingredients: Mapped[str] = mapped_column(Text, nullable=False)

    instructions: Mapped[str] = mapped_column(Text, nullable=False)

    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    category_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Recipe(id={self.id}, title='{self.title}', user_id={self.user_id})>"
