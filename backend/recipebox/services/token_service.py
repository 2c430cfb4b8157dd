"""
RecipeBox Backend: Token Issuer/Verifier
==========================================

What:  Issues and verifies signed, time-limited bearer tokens.
How:   HS256 JWTs via PyJWT. The token binds the user id in the `sub` claim
       and carries `iat`/`exp`; `exp` is always iat + ttl (one hour by
       default). Clients treat the token as opaque.
Who:   UserService issues tokens on signup/login; the authorization gate
       (recipebox.dependencies.get_current_user_id) verifies them.

Failure mapping:
    no Authorization header / empty token    → MissingCredentialError (401)
    bad signature, garbage, expired, no sub  → InvalidTokenError (400)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from recipebox.config import Settings
from recipebox.exceptions import InvalidTokenError, MissingCredentialError

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value.

    The "Bearer " prefix is stripped when present; whatever remains is the
    token. An absent header or an empty remainder raises
    MissingCredentialError.
    """
    if authorization is None:
        raise MissingCredentialError()
    token = authorization.strip()
    scheme, _, credentials = token.partition(" ")
    if scheme == BEARER_SCHEME:
        token = credentials.strip()
    if not token:
        raise MissingCredentialError()
    return token


class TokenService:
    """
    Signs and verifies identity tokens with one process-wide secret.

    Args:
        secret:      HMAC signing key (Settings.jwt_secret)
        algorithm:   JWT algorithm, HS256 unless configured otherwise
        ttl_seconds: validity window from issuance
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 3600):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = timedelta(seconds=ttl_seconds)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl_seconds=settings.token_ttl_seconds,
        )

    def issue(self, user_id: int, now: Optional[datetime] = None) -> str:
        """
        Create a token for user_id.

        Args:
            user_id: id of the authenticated user
            now:     issuance time; defaults to the current UTC time

        Returns:
            Encoded JWT string.
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """
        Validate signature and expiry and return the bound user id.

        Raises:
            InvalidTokenError: on any signature, format, expiry or claim problem
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Rejected expired token")
            raise InvalidTokenError(context={"reason": "expired"}) from e
        except jwt.InvalidTokenError as e:
            logger.warning("Rejected invalid token: %s", str(e))
            raise InvalidTokenError(context={"reason": str(e)}) from e

        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError(context={"reason": "non-integer subject"}) from e

    def verify_header(self, authorization: Optional[str]) -> int:
        """Verify the token carried in an Authorization header value."""
        return self.verify(extract_bearer_token(authorization))
