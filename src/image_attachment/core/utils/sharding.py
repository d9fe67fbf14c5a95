"""Content-hash directory sharding.

The digest only buckets files into directories so no single directory grows
unbounded; it is not an identity. Two owners uploading the same bytes get the
same shard path and separate records.
"""

import hashlib

from image_attachment.core.utils.constants import (
    SHARD_LEVEL_WIDTH,
    SHARD_LEVELS,
)


def _path_from_digest(hex_digest: str) -> str:
    levels = (
        hex_digest[level * SHARD_LEVEL_WIDTH : (level + 1) * SHARD_LEVEL_WIDTH]
        for level in range(SHARD_LEVELS)
    )
    return "".join(f"/{level}" for level in levels)


def shard_path(data: bytes) -> str:
    """Return the two-level shard path (``/h0h1/h2h3``) for raw file content."""
    return _path_from_digest(hashlib.md5(data, usedforsecurity=False).hexdigest())
