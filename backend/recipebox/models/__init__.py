"""
RecipeBox Backend: ORM Models
===============================

Importing this package registers every table on Base.metadata, which is
what Database.create_schema() and Alembic's autogenerate both read.
"""

from recipebox.models.category import Category
from recipebox.models.recipe import Recipe
from recipebox.models.user import User

__all__ = ["Category", "Recipe", "User"]
