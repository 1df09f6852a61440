"""Unit tests for the download access rule."""

import pytest

from file_broker.domain.file_storage import Identity, can_read, read_scope_for
from tests.fixtures.domain_fixtures import make_record


@pytest.fixture
def record():
    return make_record(file_id="F", owner_id="u1")


def test_owner_without_scopes_can_read(record):
    assert can_read(record, Identity.from_claims("u1"))


def test_stranger_without_scope_is_denied(record):
    assert not can_read(record, Identity.from_claims("u2"))


def test_stranger_with_exact_scope_can_read(record):
    assert can_read(record, Identity.from_claims("u2", ["file:F:read"]))


def test_anonymous_identity_is_denied(record):
    assert not can_read(record, None)


@pytest.mark.parametrize("scope", [
    "file:*:read",
    "file:F",
    "file:F:write",
    "file:F:read:extra",
    "FILE:F:READ",
    "file:G:read",
])
def test_only_exact_scope_grants_access(record, scope):
    assert not can_read(record, Identity.from_claims("u2", [scope]))


def test_empty_user_id_never_matches_owner():
    record = make_record(owner_id="")
    assert not can_read(record, Identity.from_claims(""))


def test_scope_only_token_can_read(record):
    assert can_read(record, Identity.from_claims(None, [read_scope_for("F")]))
