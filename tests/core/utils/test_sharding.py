import hashlib
import re

from image_attachment.core.utils.constants import SHARD_PATH_PATTERN
from image_attachment.core.utils.sharding import shard_path


class TestShardPath:
    def test_format_uses_first_four_hex_characters(self) -> None:
        digest = hashlib.md5(b"image-bytes").hexdigest()

        assert shard_path(b"image-bytes") == f"/{digest[0:2]}/{digest[2:4]}"

    def test_matches_layout_pattern(self) -> None:
        assert re.match(SHARD_PATH_PATTERN, shard_path(b"\x89PNG\r\n\x1a\n"))

    def test_same_bytes_same_path(self) -> None:
        assert shard_path(b"same content") == shard_path(b"same content")

    def test_different_bytes_usually_differ(self) -> None:
        paths = {shard_path(f"content-{i}".encode()) for i in range(50)}

        assert len(paths) > 40

    def test_empty_content(self) -> None:
        # md5 of b"" is d41d8cd98f00b204e9800998ecf8427e
        assert shard_path(b"") == "/d4/1d"
