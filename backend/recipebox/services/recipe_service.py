"""
RecipeBox Backend: Recipe Service (Owner-Scoped Repository)
=============================================================

What:  List, fetch, create and update recipes belonging to one user.
How:   Every statement carries `user_id = :caller` next to any id filter, so
       a recipe owned by someone else behaves exactly like a missing one.
Who:   Called by /recipes route handlers with the user id produced by the
       authorization gate.

Operations:
    list_recipes   SELECT ... WHERE user_id = :uid              (store order)
    get_recipe     SELECT ... WHERE id = :id AND user_id = :uid
    create_recipe  INSERT (all four text fields required, non-empty)
    update_recipe  UPDATE ... WHERE id = :id AND user_id = :uid (full overwrite)

There is no delete. Concurrent updates to one row are last-writer-wins.
"""

import logging
from typing import List

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.exceptions import FieldError, NotFoundError, StoreError, ValidationError
from recipebox.models.recipe import MUTABLE_FIELDS, Recipe
from recipebox.schemas.common import MessageResponse
from recipebox.schemas.recipe import MAX_SQL_INTEGER, MIN_SQL_INTEGER, RecipeInput, RecipeResponse

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    ("title", "Title is required"),
    ("description", "Description is required"),
    ("ingredients", "Ingredients are required"),
    ("instructions", "Instructions are required"),
)


def validate_recipe(payload: RecipeInput) -> List[FieldError]:
    return [
        FieldError(field, message)
        for field, message in REQUIRED_FIELDS
        if not getattr(payload, field)
    ]


def _is_storable_id(recipe_id: int) -> bool:
    return MIN_SQL_INTEGER <= recipe_id <= MAX_SQL_INTEGER


class RecipeService:
    """Owner-scoped recipe repository. Stateless; safe to share across requests."""

    async def list_recipes(self, db: AsyncSession, user_id: int) -> List[RecipeResponse]:
        """Return every recipe owned by user_id (possibly empty)."""
        try:
            result = await db.execute(select(Recipe).where(Recipe.user_id == user_id))
            recipes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing recipes for user %s: %s", user_id, str(e), exc_info=True)
            raise StoreError("Failed to fetch recipes", context={"user_id": user_id}) from e

        logger.debug("User %s has %d recipes", user_id, len(recipes))
        return [RecipeResponse.model_validate(r) for r in recipes]

    async def get_recipe(self, db: AsyncSession, user_id: int, recipe_id: int) -> RecipeResponse:
        """
        Return one recipe if it exists and belongs to user_id.

        Raises:
            NotFoundError: id unknown, or owned by another user
            StoreError:    query failed
        """
        if not _is_storable_id(recipe_id):
            raise NotFoundError("Recipe not found", context={"recipe_id": recipe_id})

        try:
            result = await db.execute(
                select(Recipe).where(Recipe.id == recipe_id, Recipe.user_id == user_id)
            )
            recipe = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching recipe %s: %s", recipe_id, str(e), exc_info=True)
            raise StoreError("Failed to fetch recipe", context={"recipe_id": recipe_id}) from e

        if recipe is None:
            raise NotFoundError("Recipe not found", context={"recipe_id": recipe_id})
        return RecipeResponse.model_validate(recipe)

    async def create_recipe(
        self, db: AsyncSession, user_id: int, payload: RecipeInput
    ) -> RecipeResponse:
        """
        Insert a recipe owned by user_id and return it as stored.

        Raises:
            ValidationError: one entry per empty required field
            StoreError:      insert failed
        """
        errors = validate_recipe(payload)
        if errors:
            raise ValidationError(errors)

        recipe = Recipe(
            title=payload.title,
            description=payload.description,
            ingredients=payload.ingredients,
            instructions=payload.instructions,
            image_url=payload.image_url,
            category_id=payload.category_id,
            user_id=user_id,
        )
        db.add(recipe)
        try:
            await db.flush()
            await db.commit()
            # Reload so the response matches what later reads return
            await db.refresh(recipe)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error adding recipe: %s", str(e), exc_info=True)
            raise StoreError("Failed to add recipe", context={"user_id": user_id}) from e

        logger.info("Recipe %s created by user %s", recipe.id, user_id)
        return RecipeResponse.model_validate(recipe)

    async def update_recipe(
        self, db: AsyncSession, user_id: int, recipe_id: int, payload: RecipeInput
    ) -> MessageResponse:
        """
        Overwrite every mutable field of a recipe owned by user_id.

        Fields are written as sent; omitted fields become NULL. No
        non-emptiness check is applied here.

        Raises:
            NotFoundError: zero rows matched (unknown id or another owner)
            StoreError:    update failed, including NOT NULL violations
        """
        if not _is_storable_id(recipe_id):
            raise NotFoundError("Recipe not found or unauthorized", context={"recipe_id": recipe_id})

        values = {field: getattr(payload, field) for field in MUTABLE_FIELDS}
        try:
            result = await db.execute(
                update(Recipe)
                .where(Recipe.id == recipe_id, Recipe.user_id == user_id)
                .values(**values)
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error updating recipe %s: %s", recipe_id, str(e), exc_info=True)
            raise StoreError("Failed to update recipe", context={"recipe_id": recipe_id}) from e

        if result.rowcount == 0:
            raise NotFoundError("Recipe not found or unauthorized", context={"recipe_id": recipe_id})

        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Commit failed updating recipe %s: %s", recipe_id, str(e), exc_info=True)
            raise StoreError("Failed to update recipe", context={"recipe_id": recipe_id}) from e

        logger.info("Recipe %s updated by user %s", recipe_id, user_id)
        return MessageResponse(message="Recipe updated successfully")
