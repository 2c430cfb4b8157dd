"""
RecipeBox Backend: Recipe Service Unit Tests
==============================================

What:  Owner scoping, required-field validation and error mapping of
       RecipeService.
How:   Mock AsyncSession; ORM objects are built in memory.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, OperationalError

from recipebox.exceptions import NotFoundError, StoreError, ValidationError
from recipebox.models.recipe import Recipe
from recipebox.schemas.recipe import RecipeInput
from recipebox.services.recipe_service import RecipeService, validate_recipe

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _recipe(**overrides) -> Recipe:
    fields = dict(
        id=1,
        title="Soup",
        description="hot",
        ingredients="water",
        instructions="boil",
        image_url=None,
        category_id=None,
        user_id=1,
        created_at=NOW,
    )
    fields.update(overrides)
    return Recipe(**fields)


def _full_input(**overrides) -> RecipeInput:
    fields = dict(title="Soup", description="hot", ingredients="water", instructions="boil")
    fields.update(overrides)
    return RecipeInput(**fields)


class TestValidateRecipe:

    def test_complete_input(self):
        assert validate_recipe(_full_input()) == []

    def test_empty_field_named_in_error(self):
        errors = validate_recipe(_full_input(ingredients=""))
        assert len(errors) == 1
        assert errors[0]["path"] == "ingredients"
        assert errors[0]["msg"] == "Ingredients are required"

    def test_all_missing(self):
        errors = validate_recipe(RecipeInput())
        assert [e["path"] for e in errors] == ["title", "description", "ingredients", "instructions"]

    def test_camel_case_aliases_accepted(self):
        payload = RecipeInput.model_validate(
            {"title": "t", "description": "d", "ingredients": "i", "instructions": "s",
             "categoryId": 3, "imageUrl": "http://test/uploads/1.jpg"}
        )
        assert payload.category_id == 3
        assert payload.image_url == "http://test/uploads/1.jpg"


class TestRecipeQueries:

    def setup_method(self):
        self.service = RecipeService()

    @pytest.mark.asyncio
    async def test_list_recipes(self, mock_db_session):
        result = MagicMock()
        result.scalars.return_value.all.return_value = [_recipe(id=1), _recipe(id=2)]
        mock_db_session.execute = AsyncMock(return_value=result)

        recipes = await self.service.list_recipes(mock_db_session, user_id=1)

        assert [r.id for r in recipes] == [1, 2]
        sql = str(mock_db_session.execute.call_args[0][0])
        assert "recipes.user_id" in sql

    @pytest.mark.asyncio
    async def test_get_recipe_filters_by_owner(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = _recipe(id=4, user_id=2)
        mock_db_session.execute = AsyncMock(return_value=result)

        recipe = await self.service.get_recipe(mock_db_session, user_id=2, recipe_id=4)

        assert recipe.id == 4
        sql = str(mock_db_session.execute.call_args[0][0])
        assert "recipes.id" in sql and "recipes.user_id" in sql

    @pytest.mark.asyncio
    async def test_get_recipe_not_found(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute = AsyncMock(return_value=result)

        with pytest.raises(NotFoundError, match="Recipe not found"):
            await self.service.get_recipe(mock_db_session, user_id=1, recipe_id=99)

    @pytest.mark.asyncio
    async def test_list_store_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("no such table"))
        )
        with pytest.raises(StoreError, match="Failed to fetch recipes"):
            await self.service.list_recipes(mock_db_session, user_id=1)


class TestCreateRecipe:

    def setup_method(self):
        self.service = RecipeService()

    @pytest.mark.asyncio
    async def test_create_sets_owner_and_returns_stored_row(self, mock_db_session):
        async def assign_generated():
            stored = mock_db_session.add.call_args[0][0]
            stored.id = 10
            stored.created_at = NOW

        mock_db_session.flush = AsyncMock(side_effect=assign_generated)

        result = await self.service.create_recipe(
            mock_db_session, user_id=3, payload=_full_input(category_id=999)
        )

        assert result.id == 10
        assert result.user_id == 3
        assert result.category_id == 999
        assert result.created_at == NOW
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_rejects_empty_fields(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_recipe(
                mock_db_session, user_id=1, payload=_full_input(title="", instructions="")
            )
        assert exc_info.value.fields == ["title", "instructions"]
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_store_failure(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("database is locked"))
        )
        with pytest.raises(StoreError, match="Failed to add recipe"):
            await self.service.create_recipe(mock_db_session, user_id=1, payload=_full_input())
        mock_db_session.rollback.assert_awaited_once()


class TestUpdateRecipe:

    def setup_method(self):
        self.service = RecipeService()

    @pytest.mark.asyncio
    async def test_update_success(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=MagicMock(rowcount=1))

        result = await self.service.update_recipe(
            mock_db_session, user_id=1, recipe_id=1, payload=_full_input(title="Stew")
        )

        assert result.message == "Recipe updated successfully"
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_zero_rows_is_not_found(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=MagicMock(rowcount=0))

        with pytest.raises(NotFoundError, match="Recipe not found or unauthorized"):
            await self.service.update_recipe(
                mock_db_session, user_id=1, recipe_id=999999, payload=_full_input()
            )
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_skips_required_field_check(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=MagicMock(rowcount=1))

        result = await self.service.update_recipe(
            mock_db_session, user_id=1, recipe_id=1, payload=_full_input(title="")
        )

        assert result.message == "Recipe updated successfully"

    @pytest.mark.asyncio
    async def test_update_constraint_violation(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=IntegrityError(
                "UPDATE recipes", {}, Exception("NOT NULL constraint failed: recipes.title")
            )
        )
        with pytest.raises(StoreError, match="Failed to update recipe"):
            await self.service.update_recipe(
                mock_db_session, user_id=1, recipe_id=1, payload=RecipeInput()
            )


class TestOutOfRangeIds:

    def setup_method(self):
        self.service = RecipeService()

    @pytest.mark.asyncio
    async def test_get_skips_query_for_unstorable_id(self, mock_db_session):
        with pytest.raises(NotFoundError, match="Recipe not found"):
            await self.service.get_recipe(mock_db_session, user_id=1, recipe_id=2**63)
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_skips_query_for_unstorable_id(self, mock_db_session):
        with pytest.raises(NotFoundError, match="Recipe not found or unauthorized"):
            await self.service.update_recipe(
                mock_db_session, user_id=1, recipe_id=-(2**63) - 1, payload=_full_input()
            )
        mock_db_session.execute.assert_not_awaited()

    def test_category_id_bounded_to_integer_column(self):
        with pytest.raises(PydanticValidationError):
            RecipeInput(category_id=2**63)
