"""Tests for fitback/auth/dependencies.py - get_current_user_id dependency."""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from fitback.auth.dependencies import get_current_user_id, get_verification_service
from fitback.auth.exceptions import InvalidTokenError, NotAuthenticatedError
from fitback.auth.verification import VerificationService


def _request(cookies=None):
    request = MagicMock()
    request.cookies = cookies or {}
    return request


def _bearer(token):
    credentials = MagicMock()
    credentials.credentials = token
    return credentials


def test_valid_bearer_token_returns_user_id(tokens):
    user_id = uuid.uuid4()
    request = _request()

    result = get_current_user_id(request, tokens, _bearer(tokens.issue(user_id)))

    assert result == str(user_id)
    assert request.state.user_id == str(user_id)


def test_valid_cookie_returns_user_id(tokens):
    user_id = uuid.uuid4()
    request = _request({"token": tokens.issue(user_id)})

    assert get_current_user_id(request, tokens, None) == str(user_id)


def test_cookie_takes_priority_over_bearer(tokens):
    cookie_user, bearer_user = uuid.uuid4(), uuid.uuid4()
    request = _request({"token": tokens.issue(cookie_user)})

    result = get_current_user_id(request, tokens, _bearer(tokens.issue(bearer_user)))

    assert result == str(cookie_user)


def test_no_token_raises_not_authenticated(tokens):
    with pytest.raises(NotAuthenticatedError) as exc_info:
        get_current_user_id(_request(), tokens, None)

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Unauthorized: No token provided"


def test_empty_cookie_falls_back_to_bearer(tokens):
    user_id = uuid.uuid4()
    request = _request({"token": ""})

    result = get_current_user_id(request, tokens, _bearer(tokens.issue(user_id)))

    assert result == str(user_id)


def test_garbage_token_raises_invalid_token(tokens):
    with pytest.raises(InvalidTokenError) as exc_info:
        get_current_user_id(_request(), tokens, _bearer("not-a-jwt"))

    assert exc_info.value.status_code == 401


def test_expired_token_raises_invalid_token(tokens):
    stale = tokens.issue(uuid.uuid4(), now=datetime.now(UTC) - timedelta(days=1))

    with pytest.raises(InvalidTokenError):
        get_current_user_id(_request({"token": stale}), tokens, None)


def test_deleted_user_token_still_passes(session, tokens, test_user):
    """The gate trusts the token alone and never consults the store."""
    user_id = str(test_user.id)
    token = tokens.issue(user_id)
    session.delete(test_user)
    session.commit()

    assert get_current_user_id(_request(), tokens, _bearer(token)) == user_id


def test_get_verification_service(session, settings):
    assert isinstance(get_verification_service(session, settings), VerificationService)
