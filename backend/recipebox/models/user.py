"""
RecipeBox Backend: User SQLAlchemy Model
==========================================

What:  ORM model for the `users` table (the credential store).
Who:   Written by UserService.signup, read by UserService.login.

Table Design:
    - Integer autoincrement id, returned to clients on signup
    - email: UNIQUE constraint; the store is the arbiter of duplicates,
      compared exactly as stored (no case folding)
    - password_hash: bcrypt output, never serialised in any response
    - Users are never updated or deleted by the service
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from recipebox.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
