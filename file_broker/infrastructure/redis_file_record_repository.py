"""
Redis File Record Repository Implementation

Concrete Redis-based implementation of FileRecordRepository.
Records are stored as JSON documents without expiry; soft-deleted records
stay in Redis for audit but are invisible to every read path.
"""

import json
from datetime import datetime
from typing import Optional

from file_broker.domain.errors import FileRecordNotFoundError, FileRecordStatusConflictError
from file_broker.domain.file_storage.entities import FileRecord
from file_broker.domain.file_storage.repositories import FileRecordRepository
from file_broker.domain.file_storage.value_objects import FileStatus
from file_broker.infrastructure.redis_repository import RedisRepository


class FileRecordConflictError(Exception):
    """Raised when creating a record whose id is already stored."""
    pass


# Integer reply of UPDATE_RECORD_SCRIPT when expected_status does not match
STATUS_CONFLICT = 0

# KEYS[1] = record key, ARGV[1] = JSON object of fields to overwrite,
# ARGV[2] = status the record must currently have, or "" for any.
# Returns the stored JSON, nil if the record is missing or deleted, or
# STATUS_CONFLICT if its status is not the expected one.
UPDATE_RECORD_SCRIPT = """
local data = redis.call('GET', KEYS[1])
if not data then
    return nil
end

local record = cjson.decode(data)
if record['is_deleted'] then
    return nil
end

if ARGV[2] ~= '' and record['status'] ~= ARGV[2] then
    return 0
end

local changes = cjson.decode(ARGV[1])
for field, value in pairs(changes) do
    record[field] = value
end

local encoded = cjson.encode(record)
redis.call('SET', KEYS[1], encoded)
return encoded
"""

# KEYS[1] = record key, ARGV[1] = updated_at ISO timestamp.
# Returns 1 when the record was deleted now, 0 if missing or already deleted.
SOFT_DELETE_SCRIPT = """
local data = redis.call('GET', KEYS[1])
if not data then
    return 0
end

local record = cjson.decode(data)
if record['is_deleted'] then
    return 0
end

record['is_deleted'] = true
record['updated_at'] = ARGV[1]
redis.call('SET', KEYS[1], cjson.encode(record))
return 1
"""


class RedisFileRecordRepository(FileRecordRepository):
    """
    Redis-based implementation of FileRecordRepository.

    update and soft_delete run as Lua scripts so each read-modify-write is
    atomic per record. Only the mutable fields (status, updated_at) are
    written by update; identity fields keep their stored values.
    """

    def __init__(self, redis_repository: RedisRepository):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
        """
        self.redis_repo = redis_repository
        self.record_prefix = "file"

    def _key(self, file_id: str) -> str:
        return f"{self.record_prefix}:{file_id}"

    def create(self, record: FileRecord) -> FileRecord:
        """Store a new record; never overwrites an existing id."""
        if not self.redis_repo.set_json(self._key(record.id), record.to_dict(), only_if_absent=True):
            raise FileRecordConflictError(f"File record already exists: {record.id}")
        return record

    def get_by_id(self, file_id: str) -> FileRecord:
        """Retrieve a live record by id."""
        data = self.redis_repo.get_json(self._key(file_id))
        if data is None or data.get("is_deleted"):
            raise FileRecordNotFoundError(file_id)
        return FileRecord.from_dict(data)

    def update(
        self, record: FileRecord, expected_status: Optional[FileStatus] = None
    ) -> FileRecord:
        """Atomically write status and updated_at of a live record."""
        record.updated_at = datetime.utcnow()
        changes = {
            "status": record.status.value,
            "updated_at": record.updated_at.isoformat(),
        }

        stored = self.redis_repo.eval_script(
            UPDATE_RECORD_SCRIPT,
            self._key(record.id),
            json.dumps(changes),
            expected_status.value if expected_status else "",
        )
        if stored is None:
            raise FileRecordNotFoundError(record.id)
        if stored == STATUS_CONFLICT:
            raise FileRecordStatusConflictError(record.id)

        if isinstance(stored, bytes):
            stored = stored.decode("utf-8")
        return FileRecord.from_dict(json.loads(stored))

    def soft_delete(self, file_id: str) -> None:
        """Atomically flag a live record as deleted."""
        deleted = self.redis_repo.eval_script(
            SOFT_DELETE_SCRIPT, self._key(file_id), datetime.utcnow().isoformat()
        )
        if not deleted:
            raise FileRecordNotFoundError(file_id)
