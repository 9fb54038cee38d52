"""Unit tests for entry kind classification."""

import asyncio
import os
import stat
from pathlib import Path

import pytest
from roadkit.nodes.errors import UnknownKindError
from roadkit.nodes.kinds import NodeKind, classify, classify_async, kind_from_mode


class TestKindFromMode:
    """Tests for mapping raw mode bits."""

    @pytest.mark.parametrize(
        ("type_bits", "expected"),
        [
            (stat.S_IFREG, NodeKind.FILE),
            (stat.S_IFDIR, NodeKind.DIRECTORY),
            (stat.S_IFBLK, NodeKind.BLOCK_DEVICE),
            (stat.S_IFCHR, NodeKind.CHARACTER_DEVICE),
            (stat.S_IFLNK, NodeKind.SYMLINK),
            (stat.S_IFIFO, NodeKind.FIFO),
            (stat.S_IFSOCK, NodeKind.SOCKET),
        ],
    )
    def test_every_type_bit(self, type_bits: int, expected: NodeKind) -> None:
        """Each S_IF* value maps to exactly one kind, regardless of permission bits."""
        assert kind_from_mode(type_bits | 0o644) is expected
        assert classify(type_bits) is expected

    def test_unknown_bits_raise(self) -> None:
        """Mode bits outside the known set raise UnknownKindError."""
        with pytest.raises(UnknownKindError) as exc_info:
            classify(0o644)

        assert exc_info.value.mode == 0o644
        assert "0o644" in str(exc_info.value)

    def test_error_mentions_source(self) -> None:
        """The original input appears in the error message."""
        with pytest.raises(UnknownKindError, match="/some/path"):
            kind_from_mode(0, "/some/path")


class TestClassifyPath:
    """Tests for classifying paths on disk."""

    def test_file_and_folder(self, sample_tree: Path) -> None:
        """Regular files and directories are recognized."""
        assert classify(sample_tree / "a.txt") is NodeKind.FILE
        assert classify(str(sample_tree / "sub")) is NodeKind.DIRECTORY

    def test_link_not_followed(self, sample_tree: Path) -> None:
        """A link to a file is reported as a link."""
        assert classify(sample_tree / "link") is NodeKind.SYMLINK

    def test_dangling_link(self, tmp_path: Path) -> None:
        """A link without a target is still classified."""
        link = tmp_path / "dangling"
        link.symlink_to(tmp_path / "missing")

        assert classify(link) is NodeKind.SYMLINK

    def test_fifo(self, tmp_path: Path) -> None:
        """Named pipes are recognized."""
        fifo = tmp_path / "pipe"
        os.mkfifo(fifo)

        assert classify(fifo) is NodeKind.FIFO

    def test_missing_path(self, tmp_path: Path) -> None:
        """A missing path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            classify(tmp_path / "missing")

    def test_async_matches_sync(self, sample_tree: Path) -> None:
        """The suspending form gives the same answers."""
        assert asyncio.run(classify_async(sample_tree / "link")) is NodeKind.SYMLINK
        assert asyncio.run(classify_async(stat.S_IFDIR)) is NodeKind.DIRECTORY

    def test_kind_is_string_valued(self) -> None:
        """Kinds compare equal to their string values."""
        assert NodeKind.CHARACTER_DEVICE == "character_device"
        assert NodeKind("symlink") is NodeKind.SYMLINK
