"""Unit tests for request authentication helpers."""

from datetime import timedelta

import pytest
from flask import Flask

from file_broker.api.auth import (
    authenticate_request,
    decode_bearer_token,
    identity_from_claims,
    verify_internal_token,
    verify_webhook_secret,
)
from file_broker.config.settings import AuthConfig
from file_broker.domain.errors import AuthenticationError
from tests.fixtures.domain_fixtures import TEST_JWT_SECRET, make_token


@pytest.fixture
def auth_app():
    app = Flask(__name__)
    config = AuthConfig()
    config.jwt_secret = TEST_JWT_SECRET
    config.jwt_algorithms = ["HS256"]
    config.internal_secret = "internal"
    config.webhook_secret = "hook"
    app.auth_config = config
    return app


class TestDecodeBearerToken:
    def test_sub_and_string_scope(self):
        token = make_token(sub="u1", scope="file:A:read file:B:read")

        identity = decode_bearer_token(token, TEST_JWT_SECRET, ["HS256"])

        assert identity.user_id == "u1"
        assert identity.scopes == frozenset({"file:A:read", "file:B:read"})

    def test_list_scope(self):
        token = make_token(sub="u1", scope=["file:A:read", ""])
        identity = decode_bearer_token(token, TEST_JWT_SECRET, ["HS256"])
        assert identity.scopes == frozenset({"file:A:read"})

    def test_missing_sub_gives_empty_user(self):
        identity = decode_bearer_token(make_token(scope="file:A:read"), TEST_JWT_SECRET, ["HS256"])
        assert identity.user_id == ""

    def test_expired_token_is_rejected(self):
        token = make_token(sub="u1", expires_in=timedelta(minutes=-1))

        with pytest.raises(AuthenticationError) as exc_info:
            decode_bearer_token(token, TEST_JWT_SECRET, ["HS256"])

        assert "expired" in exc_info.value.technical_message

    def test_bad_signature_is_rejected(self):
        token = make_token(sub="u1", secret="a-completely-different-secret-value!!")
        with pytest.raises(AuthenticationError):
            decode_bearer_token(token, TEST_JWT_SECRET, ["HS256"])

    def test_non_hmac_algorithms_are_ignored(self):
        with pytest.raises(AuthenticationError):
            decode_bearer_token(make_token(sub="u1"), TEST_JWT_SECRET, ["RS256"])

    def test_unconfigured_secret_rejects(self):
        with pytest.raises(AuthenticationError):
            decode_bearer_token(make_token(sub="u1"), None, ["HS256"])


def test_identity_from_claims_ignores_unusable_scope_claim():
    assert identity_from_claims({"sub": "u1", "scope": 42}).scopes == frozenset()


class TestAuthenticateRequest:
    def test_no_header_is_anonymous(self, auth_app):
        with auth_app.test_request_context("/"):
            assert authenticate_request() is None

    def test_non_bearer_header_is_anonymous(self, auth_app):
        with auth_app.test_request_context("/", headers={"Authorization": "Basic abc"}):
            assert authenticate_request() is None

    def test_valid_bearer(self, auth_app):
        headers = {"Authorization": f"Bearer {make_token(sub='u1')}"}
        with auth_app.test_request_context("/", headers=headers):
            assert authenticate_request().user_id == "u1"

    def test_invalid_bearer_raises(self, auth_app):
        with auth_app.test_request_context("/", headers={"Authorization": "Bearer junk"}):
            with pytest.raises(AuthenticationError):
                authenticate_request()


class TestSharedSecrets:
    def test_internal_token_accepted(self, auth_app):
        with auth_app.test_request_context("/", headers={"X-Internal-Token": "internal"}):
            verify_internal_token()

    @pytest.mark.parametrize("headers", [{}, {"X-Internal-Token": "wrong"}])
    def test_internal_token_rejected(self, auth_app, headers):
        with auth_app.test_request_context("/", headers=headers):
            with pytest.raises(AuthenticationError):
                verify_internal_token()

    def test_unconfigured_internal_secret_rejects_everything(self, auth_app):
        auth_app.auth_config.internal_secret = None
        with auth_app.test_request_context("/", headers={"X-Internal-Token": ""}):
            with pytest.raises(AuthenticationError):
                verify_internal_token()

    @pytest.mark.parametrize("value", ["hook", "Bearer hook"])
    def test_webhook_secret_accepted(self, auth_app, value):
        with auth_app.test_request_context("/", headers={"Authorization": value}):
            verify_webhook_secret()

    def test_webhook_secret_rejected(self, auth_app):
        with auth_app.test_request_context("/", headers={"Authorization": "Bearer nope"}):
            with pytest.raises(AuthenticationError):
                verify_webhook_secret()

    def test_unconfigured_webhook_secret_accepts(self, auth_app):
        auth_app.auth_config.webhook_secret = None
        with auth_app.test_request_context("/"):
            verify_webhook_secret()
