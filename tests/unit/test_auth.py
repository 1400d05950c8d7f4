"""Unit tests for passwords, tokens, acting-user resolution and accounts."""

from datetime import timedelta

import jwt
import pytest
from sqlalchemy.exc import OperationalError

from symbol_vault.auth_utils import (
    create_access_token,
    decode_token,
    hash_password,
    resolve_acting_user,
    sign_in,
    sign_up,
    verify_password,
)
from symbol_vault.config import get_settings
from symbol_vault.db.repositories.user import UserRepository
from symbol_vault.exceptions import Conflict, InvalidCredentials, StorageFailure
from symbol_vault.schemas import Credentials

pytestmark = pytest.mark.unit


@pytest.fixture
def user_repo(db_session):
    return UserRepository(db_session)


def test_password_hash_round_trip():
    hashed = hash_password("hunter2")
    assert hashed != "hunter2"
    assert verify_password("hunter2", hashed)
    assert not verify_password("hunter3", hashed)


def test_anonymous_placeholder_hash_never_verifies():
    assert not verify_password("", "!")
    assert not verify_password("anything", "!")


def test_create_and_decode_token():
    token = create_access_token({"user_id": 7, "username": "rappy"})
    decoded = decode_token(token)
    assert decoded["user_id"] == 7
    assert decoded["username"] == "rappy"
    assert "exp" in decoded


def test_decode_token_expired():
    token = create_access_token({"user_id": 7}, expires_delta=timedelta(seconds=-1))
    with pytest.raises(InvalidCredentials) as exc_info:
        decode_token(token)
    assert exc_info.value.message == "token has expired"


def test_decode_token_wrong_secret():
    token = jwt.encode({"user_id": 7}, "some-other-secret-key-of-decent-length", algorithm="HS256")
    with pytest.raises(InvalidCredentials) as exc_info:
        decode_token(token)
    assert exc_info.value.message == "invalid token"


def test_decode_token_garbage():
    with pytest.raises(InvalidCredentials):
        decode_token("not-a-jwt")


def test_resolve_acting_user_without_token_is_anonymous():
    settings = get_settings()
    assert resolve_acting_user(None, settings) == settings.ANONYMOUS_USER_ID
    assert resolve_acting_user("", settings) == settings.ANONYMOUS_USER_ID


def test_resolve_acting_user_follows_configured_anonymous_id(monkeypatch):
    monkeypatch.setenv("ANONYMOUS_USER_ID", "5")
    assert resolve_acting_user(None, get_settings()) == 5


def test_resolve_acting_user_from_token():
    token = create_access_token({"user_id": 12})
    assert resolve_acting_user(token, get_settings()) == 12


@pytest.mark.parametrize("payload", [{}, {"user_id": "12"}, {"user_id": True}])
def test_resolve_acting_user_rejects_bad_payload(payload):
    token = create_access_token(payload)
    with pytest.raises(InvalidCredentials):
        resolve_acting_user(token, get_settings())


def test_resolve_acting_user_rejects_invalid_token():
    with pytest.raises(InvalidCredentials):
        resolve_acting_user("not-a-jwt", get_settings())


def test_sign_up_then_sign_in(user_repo):
    profile = sign_up(Credentials(username="rappy", password="hunter2"), user_repo)
    assert profile.username == "rappy"
    assert profile.user_id > 1

    response = sign_in(Credentials(username="rappy", password="hunter2"), user_repo)
    assert response.user == profile
    assert decode_token(response.token)["user_id"] == profile.user_id


def test_sign_up_duplicate_username(user_repo):
    sign_up(Credentials(username="rappy", password="hunter2"), user_repo)
    with pytest.raises(Conflict):
        sign_up(Credentials(username="rappy", password="other"), user_repo)


def test_sign_in_wrong_password(user_repo):
    sign_up(Credentials(username="rappy", password="hunter2"), user_repo)
    with pytest.raises(InvalidCredentials) as exc_info:
        sign_in(Credentials(username="rappy", password="wrong"), user_repo)
    assert exc_info.value.message == "invalid login"


def test_sign_in_unknown_user(user_repo):
    with pytest.raises(InvalidCredentials):
        sign_in(Credentials(username="nobody", password="x"), user_repo)


def test_anonymous_user_cannot_sign_in(user_repo):
    with pytest.raises(InvalidCredentials):
        sign_in(Credentials(username="anonymous", password="!"), user_repo)


def test_user_lookup_errors_become_storage_failure(user_repo, db_session, monkeypatch):
    def driver_error(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("driver detail"))

    monkeypatch.setattr(db_session, "query", driver_error)
    with pytest.raises(StorageFailure):
        user_repo.get_by_username("rappy")
