"""
RecipeBox Backend: User Service (Signup & Login)
==================================================

What:  Creates users in the credential store and exchanges credentials for
       bearer tokens.
How:   Validates the request body (collecting every violation), hashes or
       checks the password with bcrypt in the threadpool, and talks to the
       `users` table through the request's AsyncSession.
Who:   Called by the /signup and /login route handlers.

Signup Flow:
    validate name/email/password → bcrypt hash → INSERT users → commit
    → issue token → {id, name, email, token}

    The UNIQUE constraint on users.email decides duplicates; a unique
    violation on insert becomes DuplicateEmailError.

Login Flow:
    validate email/password → SELECT users WHERE email = :email
    → bcrypt check → issue token → {token}
"""

import logging
from typing import List

from email_validator import EmailNotValidError, validate_email
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.exceptions import (
    DuplicateEmailError,
    FieldError,
    InvalidCredentialError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from recipebox.models.user import User
from recipebox.schemas.auth import LoginRequest, SignupRequest, SignupResponse, TokenResponse
from recipebox.services.password import hash_password, verify_password
from recipebox.services.token_service import TokenService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def is_valid_email(email: str | None) -> bool:
    """Syntax-only email check (no DNS lookups)."""
    if not email:
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_signup(payload: SignupRequest) -> List[FieldError]:
    errors: List[FieldError] = []
    if not payload.name:
        errors.append(FieldError("name", "Name is required"))
    if not is_valid_email(payload.email):
        errors.append(FieldError("email", "Invalid email"))
    if payload.password is None or len(payload.password) < MIN_PASSWORD_LENGTH:
        errors.append(
            FieldError("password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        )
    return errors


def validate_login(payload: LoginRequest) -> List[FieldError]:
    errors: List[FieldError] = []
    if not is_valid_email(payload.email):
        errors.append(FieldError("email", "Invalid email"))
    if not payload.password:
        errors.append(FieldError("password", "Password is required"))
    return errors


def _is_unique_violation(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed"; PostgreSQL: "violates unique constraint"
    return "unique" in str(exc.orig).lower()


class UserService:
    """
    Signup and login over the credential store.

    Args:
        token_service: issues the token returned by both operations
        bcrypt_rounds: cost factor for new password hashes
    """

    def __init__(self, token_service: TokenService, bcrypt_rounds: int = 10):
        self.token_service = token_service
        self.bcrypt_rounds = bcrypt_rounds

    async def signup(self, db: AsyncSession, payload: SignupRequest) -> SignupResponse:
        """
        Register a new user and return a token for them.

        Raises:
            ValidationError:     one entry per invalid field (→ 400)
            DuplicateEmailError: email already registered (→ 400)
            StoreError:          insert failed for any other reason (→ 500)
        """
        errors = validate_signup(payload)
        if errors:
            raise ValidationError(errors)

        password_hash = await run_in_threadpool(
            hash_password, payload.password, self.bcrypt_rounds
        )

        user = User(name=payload.name, email=payload.email, password_hash=password_hash)
        db.add(user)
        try:
            await db.flush()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if _is_unique_violation(e):
                logger.info("Signup rejected: duplicate email")
                raise DuplicateEmailError() from e
            logger.error("Integrity error creating user: %s", str(e.orig))
            raise StoreError("Failed to create user", context={"error": str(e.orig)}) from e
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise StoreError("Failed to create user", context={"error_type": type(e).__name__}) from e

        logger.info("User %s signed up", user.id)
        return SignupResponse(
            id=user.id,
            name=user.name,
            email=user.email,
            token=self.token_service.issue(user.id),
        )

    async def login(self, db: AsyncSession, payload: LoginRequest) -> TokenResponse:
        """
        Exchange email and password for a fresh token.

        Raises:
            ValidationError:        malformed email or empty password (→ 400)
            NotFoundError:          no user with that email (→ 404)
            InvalidCredentialError: password does not match (→ 401)
            StoreError:             lookup failed (→ 500)
        """
        errors = validate_login(payload)
        if errors:
            raise ValidationError(errors)

        try:
            result = await db.execute(select(User).where(User.email == payload.email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user: %s", str(e), exc_info=True)
            raise StoreError("Failed to fetch user", context={"error_type": type(e).__name__}) from e

        if user is None:
            raise NotFoundError("User not found")

        matches = await run_in_threadpool(verify_password, payload.password, user.password_hash)
        if not matches:
            logger.info("Login failed for user %s: wrong password", user.id)
            raise InvalidCredentialError()

        return TokenResponse(token=self.token_service.issue(user.id))
