"""
RecipeBox Backend: Token Service Unit Tests
=============================================

What:  Issuing and verifying bearer tokens, and Authorization header parsing.
How:   Real PyJWT encoding with a fixed secret; expiry is exercised by
       issuing tokens with a past issuance time.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from recipebox.exceptions import InvalidCredentialError, InvalidTokenError, MissingCredentialError
from recipebox.services.token_service import TokenService, extract_bearer_token

SECRET = "unit-test-secret"


class TestIssueAndVerify:

    def setup_method(self):
        self.service = TokenService(secret=SECRET)

    def test_roundtrip_returns_user_id(self):
        token = self.service.issue(42)
        assert self.service.verify(token) == 42

    def test_claims_bind_user_and_one_hour_expiry(self):
        now = datetime.now(timezone.utc).replace(microsecond=0)
        token = self.service.issue(7, now=now)
        claims = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert claims["sub"] == "7"
        assert claims["exp"] - claims["iat"] == 3600

    def test_token_still_valid_before_expiry(self):
        issued = datetime.now(timezone.utc) - timedelta(minutes=59)
        token = self.service.issue(3, now=issued)
        assert self.service.verify(token) == 3

    def test_expired_token_rejected(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        token = self.service.issue(3, now=issued)
        with pytest.raises(InvalidTokenError) as exc_info:
            self.service.verify(token)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid token."

    def test_wrong_secret_rejected(self):
        token = TokenService(secret="someone-else").issue(1)
        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidTokenError):
            self.service.verify("not-a-jwt")

    def test_missing_subject_rejected(self):
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"exp": exp}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_non_integer_subject_rejected(self):
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"sub": "alice", "exp": exp}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_invalid_token_is_an_invalid_credential(self):
        assert issubclass(InvalidTokenError, InvalidCredentialError)

    def test_custom_ttl(self):
        service = TokenService(secret=SECRET, ttl_seconds=60)
        issued = datetime.now(timezone.utc) - timedelta(minutes=2)
        with pytest.raises(InvalidTokenError):
            service.verify(service.issue(1, now=issued))


class TestExtractBearerToken:

    def test_strips_bearer_prefix(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_bare_token_accepted(self):
        assert extract_bearer_token("abc.def.ghi") == "abc.def.ghi"

    def test_missing_header(self):
        with pytest.raises(MissingCredentialError):
            extract_bearer_token(None)

    @pytest.mark.parametrize("value", ["", "   ", "Bearer", "Bearer   "])
    def test_empty_token(self, value):
        with pytest.raises(MissingCredentialError):
            extract_bearer_token(value)

    def test_verify_header(self):
        service = TokenService(secret=SECRET)
        token = service.issue(9)
        assert service.verify_header(f"Bearer {token}") == 9
