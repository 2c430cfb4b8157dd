"""
RecipeBox Backend: Recipe Route Handlers
==========================================

What:  CRUD (minus delete) on the caller's recipes.
How:   Every handler depends on get_current_user_id, so an unauthenticated
       request is rejected before the database session is used.

    GET  /recipes          → 200 [Recipe, ...]
    GET  /recipes/{id}     → 200 Recipe | 404
    POST /recipes          → 201 Recipe | 400
    PUT  /recipes/{id}     → 200 {message} | 404

A recipe owned by another user answers exactly like a missing one.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.database import get_db_session
from recipebox.dependencies import get_current_user_id, get_recipe_service
from recipebox.schemas.common import ErrorResponse, MessageResponse, ValidationErrorResponse
from recipebox.schemas.recipe import RecipeInput, RecipeResponse
from recipebox.services.recipe_service import RecipeService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/recipes",
    tags=["Recipes"],
    responses={
        400: {"description": "Invalid token or input", "model": ErrorResponse},
        401: {"description": "No token provided", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
)


@router.get("", response_model=List[RecipeResponse], summary="List your recipes")
async def list_recipes(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    recipe_service: RecipeService = Depends(get_recipe_service),
) -> List[RecipeResponse]:
    return await recipe_service.list_recipes(db, user_id)


@router.get(
    "/{recipe_id}",
    response_model=RecipeResponse,
    responses={404: {"description": "Recipe not found", "model": ErrorResponse}},
    summary="Get one of your recipes",
)
async def get_recipe(
    recipe_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    recipe_service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    return await recipe_service.get_recipe(db, user_id, recipe_id)


@router.post(
    "",
    status_code=201,
    response_model=RecipeResponse,
    responses={400: {"description": "Empty required fields", "model": ValidationErrorResponse}},
    summary="Create a recipe",
)
async def create_recipe(
    payload: RecipeInput,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    recipe_service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    return await recipe_service.create_recipe(db, user_id, payload)


@router.put(
    "/{recipe_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Recipe not found or unauthorized", "model": ErrorResponse}},
    summary="Overwrite one of your recipes",
)
async def update_recipe(
    recipe_id: int,
    payload: RecipeInput,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    recipe_service: RecipeService = Depends(get_recipe_service),
) -> MessageResponse:
    return await recipe_service.update_recipe(db, user_id, recipe_id, payload)
