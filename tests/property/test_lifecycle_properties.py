"""
Property-based tests for the lifecycle service and the access rule.
"""

from datetime import timedelta

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from file_broker.application.file_lifecycle_service import FileLifecycleService
from file_broker.domain.errors import AccessDeniedError, FileRecordNotFoundError, InvalidInputError
from file_broker.domain.file_storage import ConfirmOutcome, FileStatus, Identity, can_read, read_scope_for
from tests.fixtures.domain_fixtures import make_record
from tests.fixtures.mock_repositories import MockFileRecordRepository, MockUrlIssuer
from tests.property.strategies import content_types, file_ids, scope_sets, user_ids

MAX_SIZE = 10 * 1024 * 1024


def new_service():
    repository = MockFileRecordRepository()
    service = FileLifecycleService(
        repository, MockUrlIssuer(), MAX_SIZE, timedelta(minutes=5), timedelta(minutes=15)
    )
    return service, repository


@given(owner_id=user_ids, content_type=content_types, size=st.integers(min_value=1, max_value=MAX_SIZE))
def test_valid_uploads_create_pending_owner_scoped_records(owner_id, content_type, size):
    service, repository = new_service()

    slot = service.begin_upload(owner_id, content_type, size)

    record = repository.raw(slot.file_id)
    assert record.status == FileStatus.PENDING
    assert record.storage_path == f"{owner_id}/{slot.file_id}"
    assert slot.upload_url


@given(size=st.one_of(st.integers(max_value=0), st.integers(min_value=MAX_SIZE + 1)))
def test_out_of_range_sizes_never_reach_the_store(size):
    service, repository = new_service()

    with pytest.raises(InvalidInputError):
        service.begin_upload("u1", "application/pdf", size)

    assert repository.calls("create") == []


@given(confirmations=st.integers(min_value=1, max_value=10))
def test_confirmation_is_exactly_once(confirmations):
    service, repository = new_service()
    repository.put(make_record(file_id="F"))

    outcomes = [service.confirm_upload("F") for _ in range(confirmations)]

    assert outcomes[0] == ConfirmOutcome.CONFIRMED
    assert all(o == ConfirmOutcome.ALREADY_UPLOADED for o in outcomes[1:])
    assert len(repository.calls("update")) == 1


@given(file_id=file_ids)
def test_confirming_unknown_files_never_writes(file_id):
    service, repository = new_service()

    assert service.confirm_upload(file_id) == ConfirmOutcome.NOT_FOUND
    assert repository.calls("update") == []


@given(owner_id=user_ids, scopes=scope_sets)
def test_owner_always_reads_regardless_of_scopes(owner_id, scopes):
    record = make_record(file_id="F", owner_id=owner_id)
    assert can_read(record, Identity.from_claims(owner_id, scopes))


@given(owner_id=user_ids, requester_id=user_ids, file_id=file_ids, scopes=scope_sets)
def test_non_owner_reads_only_with_exact_scope(owner_id, requester_id, file_id, scopes):
    assume(owner_id != requester_id)
    record = make_record(file_id=file_id, owner_id=owner_id)

    allowed = can_read(record, Identity.from_claims(requester_id, scopes))

    assert allowed == (read_scope_for(file_id) in scopes)


@given(owner_id=user_ids, requester_id=user_ids)
def test_download_denied_for_strangers_and_gone_after_delete(owner_id, requester_id):
    assume(owner_id != requester_id)
    service, repository = new_service()
    repository.put(make_record(file_id="F", owner_id=owner_id))

    with pytest.raises(AccessDeniedError):
        service.get_download_url("F", Identity.from_claims(requester_id))

    service.delete_file("F")

    with pytest.raises(FileRecordNotFoundError):
        service.get_download_url("F", Identity.from_claims(owner_id))
