"""Unit tests for File nodes."""

import asyncio
import os
from pathlib import Path

import pytest
from roadkit.nodes import File, Folder, ImmutableError, TypeMismatchError


@pytest.fixture
def text_file(tmp_path: Path) -> File:
    """A file holding three lines of text."""
    path = tmp_path / "notes.txt"
    path.write_text("one\ntwo\nthree\n")
    return File(path)


class TestCreate:
    """Tests for File.create."""

    def test_creates_empty_file(self, tmp_path: Path) -> None:
        """A missing path becomes an empty file."""
        node = File.create(tmp_path / "new.txt")

        assert node.read_bytes() == b""
        assert (tmp_path / "new.txt").is_file()

    def test_keeps_existing_content(self, text_file: File) -> None:
        """An existing file is returned unchanged."""
        again = File.create(text_file.location)

        assert again == text_file
        assert again.read_text() == "one\ntwo\nthree\n"

    def test_rejects_other_kind(self, tmp_path: Path) -> None:
        """A directory at the path is a type mismatch."""
        with pytest.raises(TypeMismatchError):
            File.create(tmp_path)

    def test_async(self, tmp_path: Path) -> None:
        """The suspending form creates the file too."""
        node = asyncio.run(File.create_async(tmp_path / "async.txt"))

        assert node.exists()


class TestReadWrite:
    """Tests for whole-content reads and writes."""

    @pytest.mark.parametrize(
        "content",
        [b"", b"abc", b"\x00\xff\x00 nul bytes", bytes(range(256)) * 5000],
        ids=["empty", "small", "nul", "over-1mb"],
    )
    def test_bytes_round_trip(self, tmp_path: Path, content: bytes) -> None:
        """Bytes written are the bytes read back."""
        node = File.create(tmp_path / "data.bin")

        node.write_bytes(content)

        assert node.read_bytes() == content

    def test_text_keeps_line_endings(self, tmp_path: Path) -> None:
        """Text is stored verbatim, including CRLF."""
        node = File.create(tmp_path / "crlf.txt")

        node.write_text("a\r\nb\n")

        assert node.read_text() == "a\r\nb\n"
        assert node.read_bytes() == b"a\r\nb\n"

    def test_write_replaces(self, text_file: File) -> None:
        """Writing truncates the previous content."""
        text_file.write_text("x")

        assert text_file.read_text() == "x"

    def test_append(self, tmp_path: Path) -> None:
        """Appends add to the end."""
        node = File.create(tmp_path / "log.txt")

        node.append_text("a")
        node.append_bytes(b"b")
        node.append_text("c")

        assert node.read_text() == "abc"

    def test_encoding(self, tmp_path: Path) -> None:
        """A custom encoding is honoured both ways."""
        node = File.create(tmp_path / "latin.txt")

        node.write_text("café", encoding="latin-1")

        assert node.read_bytes() == b"caf\xe9"
        assert node.read_text(encoding="latin-1") == "café"

    def test_async_forms(self, tmp_path: Path) -> None:
        """Suspending reads and writes behave like the blocking ones."""
        node = File.create(tmp_path / "async.txt")

        async def scenario() -> tuple[str, bytes]:
            await node.write_text_async("hello")
            await node.append_text_async(" world")
            await node.append_bytes_async(b"!")
            text = await node.read_text_async()
            await node.write_bytes_async(b"\x01\x02")
            return text, await node.read_bytes_async()

        assert asyncio.run(scenario()) == ("hello world!", b"\x01\x02")

    def test_read_missing_raises(self, text_file: File) -> None:
        """OS errors propagate unchanged."""
        os.unlink(text_file.location)

        with pytest.raises(FileNotFoundError):
            text_file.read_bytes()
        with pytest.raises(FileNotFoundError):
            asyncio.run(text_file.read_text_async())


class TestIteration:
    """Tests for line and chunk iteration."""

    def test_lines(self, text_file: File) -> None:
        """Lines come without their terminators."""
        assert list(text_file.iterate_lines()) == ["one", "two", "three"]

    def test_lines_without_trailing_newline(self, tmp_path: Path) -> None:
        """The last line is yielded even without a newline."""
        path = tmp_path / "tail.txt"
        path.write_text("a\nb")

        assert list(File(path).iterate_lines()) == ["a", "b"]

    def test_lines_restartable(self, text_file: File) -> None:
        """Each call starts from the beginning."""
        first = list(text_file.iterate_lines())
        second = list(text_file.iterate_lines())

        assert first == second

    def test_lines_async(self, text_file: File) -> None:
        """The async iterator yields the same lines."""

        async def collect() -> list[str]:
            return [line async for line in text_file.iterate_lines_async()]

        assert asyncio.run(collect()) == ["one", "two", "three"]

    def test_chunks(self, tmp_path: Path) -> None:
        """Only the last chunk may be shorter."""
        path = tmp_path / "big.bin"
        path.write_bytes(b"z" * 10000)

        chunks = list(File(path).iterate_chunks(4096))

        assert [len(chunk) for chunk in chunks] == [4096, 4096, 1808]
        assert b"".join(chunks) == b"z" * 10000

    def test_chunks_default_size(self, tmp_path: Path) -> None:
        """Without a size the configured chunk size is used."""
        path = tmp_path / "medium.bin"
        path.write_bytes(b"m" * 2500)

        sizes = [len(chunk) for chunk in File(path).iterate_chunks()]

        assert sizes == [1024, 1024, 452]

    def test_chunks_empty_file(self, tmp_path: Path) -> None:
        """An empty file yields no chunks."""
        assert list(File.create(tmp_path / "empty").iterate_chunks(16)) == []

    @pytest.mark.parametrize("size", [0, -1])
    def test_chunks_invalid_size(self, text_file: File, size: int) -> None:
        """Non-positive sizes are rejected."""
        with pytest.raises(ValueError, match="positive"):
            list(text_file.iterate_chunks(size))

    def test_chunks_async(self, tmp_path: Path) -> None:
        """The async iterator yields the same chunks."""
        path = tmp_path / "big.bin"
        path.write_bytes(b"q" * 10000)

        async def collect() -> list[bytes]:
            return [chunk async for chunk in File(path).iterate_chunks_async(4096)]

        assert [len(chunk) for chunk in asyncio.run(collect())] == [4096, 4096, 1808]


class TestStreams:
    """Tests for raw stream access."""

    def test_read_and_write_streams(self, tmp_path: Path) -> None:
        """Streams give direct binary access."""
        node = File.create(tmp_path / "stream.bin")

        with node.open_write_stream() as out:
            out.write(b"streamed")
        with node.open_read_stream() as src:
            assert src.read() == b"streamed"

    def test_write_stream_guarded(self, text_file: File) -> None:
        """Opening a write stream on an immutable node fails without truncating."""
        text_file.mutable = False

        with pytest.raises(ImmutableError):
            text_file.open_write_stream()

        assert text_file.read_text() == "one\ntwo\nthree\n"


class TestProperties:
    """Tests for extension and content comparison."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("a.txt", ".txt"), ("archive.tar.gz", ".gz"), ("Makefile", ""), (".bashrc", "")],
    )
    def test_extension(self, tmp_path: Path, name: str, expected: str) -> None:
        """The extension is the last suffix including its dot."""
        assert File.create(tmp_path / name).extension() == expected

    def test_content_equals_same_location(self, text_file: File) -> None:
        """Two nodes over the same file compare equal."""
        assert text_file.content_equals(File(text_file.location))
        assert asyncio.run(text_file.content_equals_async(File(text_file.location)))

    def test_content_equals_other_location(self, text_file: File, tmp_path: Path) -> None:
        """Identical bytes at another path do not count as equal content."""
        other = tmp_path / "copy.txt"
        other.write_bytes(text_file.read_bytes())

        assert not text_file.content_equals(File(other))


class TestPositional:
    """Tests for delete, move, copy and rename."""

    def test_delete(self, text_file: File) -> None:
        """delete() removes the file."""
        text_file.delete()

        assert not os.path.exists(text_file.location)

    def test_move_into(self, text_file: File, tmp_path: Path) -> None:
        """Moving keeps the name and updates the location."""
        target = Folder.create(tmp_path / "moved")
        old = text_file.location

        text_file.move_into(target)

        assert text_file.location == str(tmp_path / "moved" / "notes.txt")
        assert not os.path.exists(old)
        assert text_file.read_text() == "one\ntwo\nthree\n"

    def test_move_into_refuses_overwrite(self, text_file: File, tmp_path: Path) -> None:
        """An existing destination is left alone."""
        target = Folder.create(tmp_path / "busy")
        (tmp_path / "busy" / "notes.txt").write_text("keep me")

        with pytest.raises(FileExistsError):
            text_file.move_into(target)

        assert (tmp_path / "busy" / "notes.txt").read_text() == "keep me"
        assert text_file.exists()

    def test_copy_into(self, text_file: File, tmp_path: Path) -> None:
        """Copying returns a new File and leaves the source in place."""
        target = Folder.create(tmp_path / "copies")

        copy = text_file.copy_into(target)

        assert isinstance(copy, File)
        assert copy.location == str(tmp_path / "copies" / "notes.txt")
        assert copy.read_bytes() == text_file.read_bytes()
        assert text_file.exists()

    def test_copy_into_refuses_overwrite(self, text_file: File, tmp_path: Path) -> None:
        """Copying onto an existing entry fails."""
        target = Folder.create(tmp_path / "copies")
        (tmp_path / "copies" / "notes.txt").write_text("keep me")

        with pytest.raises(FileExistsError):
            text_file.copy_into(target)

    def test_rename_to(self, text_file: File, tmp_path: Path) -> None:
        """Renaming stays in the same directory."""
        text_file.rename_to("renamed.md")

        assert text_file.location == str(tmp_path / "renamed.md")
        assert text_file.extension() == ".md"

    def test_rename_to_existing(self, text_file: File, tmp_path: Path) -> None:
        """Renaming onto an existing name fails."""
        (tmp_path / "taken.txt").write_text("")

        with pytest.raises(FileExistsError):
            text_file.rename_to("taken.txt")

    def test_async_positional(self, text_file: File, tmp_path: Path) -> None:
        """Suspending forms of the positional operations."""
        target = Folder.create(tmp_path / "async")

        async def scenario() -> File:
            copy = await text_file.copy_into_async(target)
            await copy.rename_to_async("copy.txt")
            await text_file.move_into_async(target)
            await text_file.delete_async()
            return copy

        copy = asyncio.run(scenario())

        assert copy.location == str(tmp_path / "async" / "copy.txt")
        assert [entry.name() for entry in target.list()] == ["copy.txt"]
