"""
File Access Policy

Decides who may obtain a download URL for a file.
"""

from typing import Optional

from .entities import FileRecord
from .value_objects import Identity, read_scope_for


def can_read(record: FileRecord, identity: Optional[Identity]) -> bool:
    """
    Return True if the identity may read the file.

    The owner always may. Anyone else needs the exact scope
    ``file:{record.id}:read``. No wildcards, no prefix matches.
    An absent identity is always denied.

    Args:
        record: File being requested
        identity: Authenticated requester, or None

    Returns:
        True if access is granted
    """
    if identity is None:
        return False

    if identity.user_id and identity.user_id == record.owner_id:
        return True

    return identity.has_scope(read_scope_for(record.id))
