"""
RecipeBox Backend: Signup & Login Routes
==========================================

POST /signup  {name, email, password} → 201 {id, name, email, token}
POST /login   {email, password}       → 200 {token}

Neither route requires a token.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.database import get_db_session
from recipebox.dependencies import get_user_service
from recipebox.schemas.auth import LoginRequest, SignupRequest, SignupResponse, TokenResponse
from recipebox.schemas.common import ErrorResponse, ValidationErrorResponse
from recipebox.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post(
    "/signup",
    status_code=201,
    response_model=SignupResponse,
    responses={
        400: {"description": "Invalid fields or email already registered",
              "model": ValidationErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def signup(
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db_session),
    user_service: UserService = Depends(get_user_service),
) -> SignupResponse:
    return await user_service.signup(db, payload)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        400: {"description": "Invalid fields", "model": ValidationErrorResponse},
        401: {"description": "Wrong password", "model": ErrorResponse},
        404: {"description": "Unknown email", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Exchange credentials for a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    user_service: UserService = Depends(get_user_service),
) -> TokenResponse:
    return await user_service.login(db, payload)
