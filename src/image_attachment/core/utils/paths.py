"""Helpers mapping image records onto the upload tree and public URLs.

Both layouts are ``{root}/{folder}/{h0h1}/{h2h3}/{image_id}.{extension}``;
an empty folder collapses to ``{root}/{h0h1}/{h2h3}/...``.
"""

from pathlib import Path


def relative_key(*, folder: str, shard: str, image_id: str, extension: str) -> str:
    """Return the root-relative key of one derivative file, without leading slash."""
    prefix = f"{folder}/" if folder else ""
    return f"{prefix}{shard.strip('/')}/{image_id}.{extension}"


def file_location(
    upload_root: Path, *, folder: str, shard: str, image_id: str, extension: str
) -> Path:
    return upload_root / relative_key(
        folder=folder, shard=shard, image_id=image_id, extension=extension
    )


def public_url(
    public_root: str, *, folder: str, shard: str, image_id: str, extension: str
) -> str:
    key = relative_key(folder=folder, shard=shard, image_id=image_id, extension=extension)
    return f"{public_root.rstrip('/')}/{key}"
