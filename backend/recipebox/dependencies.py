"""
RecipeBox Backend: Request Dependencies & Authorization Gate
==============================================================

What:  FastAPI dependencies that hand route handlers their collaborators.
How:   Everything is read from request.app.state, populated once by
       create_app(); nothing here is a module-level instance.

Authorization Gate:
    Unauthenticated ──(valid bearer token)──▶ Authenticated(user_id)

    get_current_user_id is the only way a recipe route learns who is
    calling. A missing token raises MissingCredentialError (401); a bad or
    expired one raises InvalidTokenError (400). Either way the handler body
    and the database are never reached.
"""

import logging
from typing import Optional

from fastapi import Header, Request

from recipebox.services.file_service import FileService
from recipebox.services.recipe_service import RecipeService
from recipebox.services.token_service import TokenService
from recipebox.services.user_service import UserService

logger = logging.getLogger(__name__)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_recipe_service(request: Request) -> RecipeService:
    return request.app.state.recipe_service


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


async def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(default=None, description="Bearer <token>"),
) -> int:
    """Verify the caller's bearer token and return the user id it binds."""
    user_id = get_token_service(request).verify_header(authorization)
    request.state.user_id = user_id
    logger.debug("Authenticated user %s", user_id)
    return user_id
