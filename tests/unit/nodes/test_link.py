"""Unit tests for SymbolicLink nodes."""

import asyncio
import os
from pathlib import Path

import pytest
from roadkit.nodes import File, Folder, SymbolicLink, TypeMismatchError


@pytest.fixture
def linked(tmp_path: Path) -> SymbolicLink:
    """A link named ``ref`` pointing at ``target.txt`` in the same folder."""
    (tmp_path / "target.txt").write_text("payload")
    return SymbolicLink.create(tmp_path / "ref", "target.txt")


class TestCreate:
    """Tests for SymbolicLink.create."""

    def test_creates_link(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """The new link stores the given target text."""
        assert os.path.islink(tmp_path / "ref")
        assert linked.raw_target() == "target.txt"

    def test_existing_link_kept(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """create() does not retarget an existing link."""
        again = SymbolicLink.create(tmp_path / "ref", "/elsewhere")

        assert again.raw_target() == "target.txt"

    def test_rejects_file(self, tmp_path: Path) -> None:
        """A regular file at the path is a type mismatch."""
        (tmp_path / "plain").write_text("")

        with pytest.raises(TypeMismatchError):
            SymbolicLink.create(tmp_path / "plain", "x")

    def test_target_may_be_a_node(self, tmp_path: Path) -> None:
        """Nodes are accepted as targets through the path protocol."""
        folder = Folder.create(tmp_path / "dir")

        link = asyncio.run(SymbolicLink.create_async(tmp_path / "to-dir", folder))

        assert link.target() == folder


class TestTarget:
    """Tests for resolving and changing targets."""

    def test_target_returns_file(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """A link to a file resolves to a File at the target location."""
        target = linked.target()

        assert isinstance(target, File)
        assert target.location == str(tmp_path / "target.txt")
        assert target.read_text() == "payload"

    def test_target_path_relative_to_link(self, tmp_path: Path) -> None:
        """Relative targets resolve against the link's directory, not the cwd."""
        (tmp_path / "sub").mkdir()
        (tmp_path / "data.txt").write_text("")
        link = SymbolicLink.create(tmp_path / "sub" / "up", "../data.txt")

        assert link.target_path() == str(tmp_path / "data.txt")

    def test_target_async(self, linked: SymbolicLink) -> None:
        """The suspending form resolves the same node."""
        assert asyncio.run(linked.target_async()) == linked.target()

    def test_target_read_fresh(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """The target is read from disk on every call."""
        (tmp_path / "other.txt").write_text("")
        os.unlink(tmp_path / "ref")
        os.symlink("other.txt", tmp_path / "ref")

        assert linked.target().name() == "other.txt"

    def test_dangling_link(self, tmp_path: Path) -> None:
        """A dangling link can be built but not resolved."""
        link = SymbolicLink.create(tmp_path / "broken", tmp_path / "nowhere")

        assert link.exists()
        with pytest.raises(FileNotFoundError):
            link.target()

    def test_retarget(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """Retargeting swaps the stored target in place."""
        (tmp_path / "second.txt").write_text("second")

        linked.retarget("second.txt")

        assert linked.raw_target() == "second.txt"
        assert linked.target().read_text() == "second"  # type: ignore[attr-defined]
        assert sorted(os.listdir(tmp_path)) == ["ref", "second.txt", "target.txt"]

    def test_retarget_relative_to_link(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A relative new target is kept verbatim and resolved from the link's folder."""
        (tmp_path / "sub").mkdir()
        (tmp_path / "data.txt").write_text("data")
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        link = SymbolicLink.create(tmp_path / "sub" / "ref", tmp_path / "sub")
        monkeypatch.chdir(elsewhere)

        link.retarget("../data.txt")

        assert link.raw_target() == "../data.txt"
        assert link.target() == File(tmp_path / "data.txt")

    def test_retarget_async(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """The suspending form retargets too."""
        asyncio.run(linked.retarget_async(tmp_path))

        assert linked.target() == Folder(tmp_path)


class TestPositional:
    """Tests for delete, move, copy and rename."""

    def test_delete_keeps_target(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """Deleting the link leaves the target alone."""
        linked.delete()

        assert not os.path.lexists(tmp_path / "ref")
        assert (tmp_path / "target.txt").read_text() == "payload"

    def test_copy_into(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """The copy is a new link to the same target, not a copy of the data."""
        target = Folder.create(tmp_path / "copies")

        copy = linked.copy_into(target)

        assert isinstance(copy, SymbolicLink)
        assert copy.location == str(tmp_path / "copies" / "ref")
        assert copy.target() == linked.target()
        assert os.listdir(target.location) == ["ref"]

    def test_move_into(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """Moving relocates the link itself."""
        target = Folder.create(tmp_path / "moved")

        linked.move_into(target)

        assert linked.location == str(tmp_path / "moved" / "ref")
        assert os.path.islink(linked.location)

    def test_rename_to(self, linked: SymbolicLink, tmp_path: Path) -> None:
        """Renaming keeps the stored target."""
        linked.rename_to("alias")

        assert linked.location == str(tmp_path / "alias")
        assert linked.raw_target() == "target.txt"
