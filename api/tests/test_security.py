"""Tests for bearer token handling."""

import uuid
from datetime import timedelta

import pytest

from app.exceptions import AuthError
from app.security import create_access_token, get_bearer_token, validate_access_token

SECRET = "test-secret"
ISSUER = "tubely-access"


class TestGetBearerToken:
    """Tests for get_bearer_token function."""

    def test_extracts_token(self):
        assert get_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert get_bearer_token("bearer abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic dXNlcjpwYXNz", "abc"])
    def test_rejects(self, header):
        with pytest.raises(AuthError):
            get_bearer_token(header)


class TestAccessTokens:
    """Tests for token creation and validation."""

    def test_round_trip(self):
        user_id = uuid.uuid4()
        token = create_access_token(user_id, SECRET, ISSUER, timedelta(minutes=5))
        assert validate_access_token(token, SECRET, ISSUER) == user_id

    def test_wrong_secret(self):
        token = create_access_token(uuid.uuid4(), SECRET, ISSUER, timedelta(minutes=5))
        with pytest.raises(AuthError):
            validate_access_token(token, "other-secret", ISSUER)

    def test_wrong_issuer(self):
        token = create_access_token(uuid.uuid4(), SECRET, "someone-else", timedelta(minutes=5))
        with pytest.raises(AuthError):
            validate_access_token(token, SECRET, ISSUER)

    def test_expired(self):
        token = create_access_token(uuid.uuid4(), SECRET, ISSUER, timedelta(seconds=-60))
        with pytest.raises(AuthError) as exc_info:
            validate_access_token(token, SECRET, ISSUER)
        assert exc_info.value.status_code == 401

    def test_garbage(self):
        with pytest.raises(AuthError):
            validate_access_token("not-a-jwt", SECRET, ISSUER)
