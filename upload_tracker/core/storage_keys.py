"""
Storage key generation for upload targets.

Keys are derived deterministically from (job id, item id, name) so every
item of every job gets a distinct object key.

Format: {prefix}/{job_id}/{item_id}-{sanitized_name}

Dependencies: None
System role: Upload destination naming
"""

import re
from uuid import UUID

_UNSAFE_CHARS = re.compile(r"[^a-z0-9._-]")

DEFAULT_NAME = "item"


def sanitize_name(name: str) -> str:
    """
    Make an item name safe for use inside an object key.

    Lower-cases the name and replaces every character outside
    ``[a-z0-9._-]`` with an underscore. Path separators therefore never
    survive. Names made only of dots collapse to DEFAULT_NAME.
    """
    sanitized = _UNSAFE_CHARS.sub("_", name.strip().lower())
    if not sanitized.strip("."):
        return DEFAULT_NAME
    return sanitized


def build_storage_key(prefix: str, job_id: UUID, item_id: UUID, name: str) -> str:
    """
    Build the object key for one item.

    Args:
        prefix: Bucket prefix (e.g. "uploads"); surrounding slashes are ignored
        job_id: Parent job UUID
        item_id: Item UUID
        name: Client-supplied item name

    Returns:
        str: Object key unique per (job, item)
    """
    prefix = prefix.strip("/")
    leaf = f"{job_id}/{item_id}-{sanitize_name(name)}"
    return f"{prefix}/{leaf}" if prefix else leaf
