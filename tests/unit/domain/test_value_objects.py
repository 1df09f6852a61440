"""Unit tests for file storage value objects."""

from dataclasses import FrozenInstanceError

import pytest

from file_broker.domain.file_storage import (
    DownloadLink,
    FileStatus,
    Identity,
    UploadSlot,
    read_scope_for,
)


def test_read_scope_format():
    assert read_scope_for("abc") == "file:abc:read"


def test_identity_from_claims_drops_empty_scopes():
    identity = Identity.from_claims("u1", ["a", "", "b"])
    assert identity.scopes == frozenset({"a", "b"})


def test_identity_from_claims_none_user_becomes_empty():
    identity = Identity.from_claims(None)
    assert identity.user_id == ""
    assert identity.scopes == frozenset()


def test_identity_is_immutable():
    identity = Identity.from_claims("u1")
    with pytest.raises(FrozenInstanceError):
        identity.user_id = "u2"


def test_result_objects_to_dict():
    assert UploadSlot("f", "https://put").to_dict() == {"file_id": "f", "upload_url": "https://put"}
    assert DownloadLink("https://get").to_dict() == {"download_url": "https://get"}


def test_status_values():
    assert FileStatus("pending") is FileStatus.PENDING
    assert FileStatus("uploaded") is FileStatus.UPLOADED
