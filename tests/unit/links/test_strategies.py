"""Unit tests for the symbolic and hard link strategies."""

import errno
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from linkctl.links.errors import ErrorKind, LinkError
from linkctl.links.models import LinkDescriptor, LinkKind
from linkctl.links.prober import inspect
from linkctl.links.strategies import STRATEGIES, get_strategy

SYMBOLIC = STRATEGIES[LinkKind.SYMBOLIC]
HARD = STRATEGIES[LinkKind.HARD]


def _symbolic(target: Path, destination: str | Path) -> LinkDescriptor:
    return LinkDescriptor(target_path=str(target), destination=str(destination))


def _hard(target: Path, destination: str | Path) -> LinkDescriptor:
    return LinkDescriptor(
        target_path=str(target),
        destination=str(destination),
        link_kind=LinkKind.HARD,
    )


class TestGetStrategy:
    """Tests for strategy lookup."""

    def test_every_kind_has_a_strategy(self) -> None:
        """Each LinkKind maps to a strategy."""
        for kind in LinkKind:
            assert get_strategy(kind) is STRATEGIES[kind]


class TestSymbolicSatisfied:
    """Tests for the symbolic already_satisfied check."""

    def test_matching_symlink(self, to_file: Path, target: Path) -> None:
        """A symlink with the exact destination string is satisfied."""
        target.symlink_to(to_file)
        desired = _symbolic(target, to_file)

        assert SYMBOLIC.already_satisfied(desired, inspect(str(target))) is True

    def test_equivalent_path_not_satisfied(self, to_file: Path, target: Path) -> None:
        """A differently spelled path to the same file is not satisfied."""
        target.symlink_to(to_file.name)
        desired = _symbolic(target, to_file)

        assert SYMBOLIC.already_satisfied(desired, inspect(str(target))) is False

    def test_regular_file_not_satisfied(self, to_file: Path) -> None:
        """A regular file never satisfies a symbolic link."""
        desired = _symbolic(to_file, to_file)
        assert SYMBOLIC.already_satisfied(desired, inspect(str(to_file))) is False

    def test_absent_not_satisfied(self, to_file: Path, target: Path) -> None:
        """An absent target is not satisfied."""
        desired = _symbolic(target, to_file)
        assert SYMBOLIC.already_satisfied(desired, inspect(str(target))) is False


class TestSymbolicCreate:
    """Tests for symbolic link creation."""

    def test_creates_dangling_symlink(self, tmp_path: Path, target: Path) -> None:
        """Missing destinations still produce a symlink."""
        missing = tmp_path / "missing"

        SYMBOLIC.create(_symbolic(target, missing), None)

        assert target.is_symlink()
        assert os.readlink(target) == str(missing)

    def test_replaces_regular_file(self, to_file: Path, other_file: Path) -> None:
        """An existing file is replaced by the symlink."""
        SYMBOLIC.create(_symbolic(other_file, to_file), None)

        assert other_file.is_symlink()
        assert other_file.read_text() == "woohoo"

    def test_before_swap_sees_old_entry(self, to_file: Path, other_file: Path) -> None:
        """The hook runs while the replaced file is still in place."""
        seen: list[str] = []

        SYMBOLIC.create(
            _symbolic(other_file, to_file),
            lambda: seen.append(other_file.read_text()),
        )

        assert seen == ["eek"]
        assert other_file.is_symlink()

    def test_no_staging_leftovers(self, tmp_path: Path, to_file: Path, target: Path) -> None:
        """Only the link remains in the directory after creation."""
        SYMBOLIC.create(_symbolic(target, to_file), None)
        assert sorted(os.listdir(tmp_path)) == ["link", "to_file"]

    def test_failed_swap_cleans_up(self, tmp_path: Path, to_file: Path, other_file: Path) -> None:
        """A failed swap removes the staged link and keeps the old file."""
        denied = PermissionError(errno.EACCES, "Permission denied")

        with (
            patch("linkctl.links.strategies.os.replace", side_effect=denied),
            pytest.raises(LinkError) as exc_info,
        ):
            SYMBOLIC.create(_symbolic(other_file, to_file), None)

        assert exc_info.value.kind == ErrorKind.PERMISSION_DENIED
        assert other_file.read_text() == "eek"
        assert not other_file.is_symlink()
        assert sorted(os.listdir(tmp_path)) == ["other_file", "to_file"]

    def test_failing_hook_cleans_up(self, tmp_path: Path, to_file: Path, other_file: Path) -> None:
        """A hook failure aborts the swap and removes the staged link."""
        hook = MagicMock(side_effect=RuntimeError("backup store unavailable"))

        with pytest.raises(RuntimeError):
            SYMBOLIC.create(_symbolic(other_file, to_file), hook)

        assert other_file.read_text() == "eek"
        assert sorted(os.listdir(tmp_path)) == ["other_file", "to_file"]

    def test_long_target_name(self, tmp_path: Path) -> None:
        """Target names close to NAME_MAX still get a valid staging name."""
        target = tmp_path / ("a" * 250)

        SYMBOLIC.create(_symbolic(target, "somewhere"), None)

        assert os.readlink(target) == "somewhere"
        assert os.listdir(tmp_path) == ["a" * 250]

    def test_missing_parent_is_not_found(self, tmp_path: Path, to_file: Path) -> None:
        """Creating a link in a missing directory fails with NOT_FOUND."""
        target = tmp_path / "no" / "such" / "dir" / "link"

        with pytest.raises(LinkError) as exc_info:
            SYMBOLIC.create(_symbolic(target, to_file), None)

        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert exc_info.value.path == str(target)


class TestSymbolicPreflight:
    """Tests for the symbolic preflight check."""

    def test_accepts_missing_destination(self, tmp_path: Path, target: Path) -> None:
        """Dangling destinations are allowed."""
        assert SYMBOLIC.preflight(_symbolic(target, tmp_path / "missing")) is None

    def test_refuses_empty_destination(self, target: Path) -> None:
        """An empty destination is refused with NOT_FOUND."""
        refusal = SYMBOLIC.preflight(LinkDescriptor(target_path=str(target)))

        assert refusal is not None
        assert refusal.kind == ErrorKind.NOT_FOUND


class TestHardSatisfied:
    """Tests for the hard already_satisfied check."""

    def test_same_inode(self, to_file: Path, target: Path) -> None:
        """A hard link to the destination is satisfied."""
        os.link(to_file, target)
        desired = _hard(target, to_file)

        assert HARD.already_satisfied(desired, inspect(str(target))) is True

    def test_different_file(self, to_file: Path, other_file: Path, target: Path) -> None:
        """A hard link to another file is not satisfied."""
        os.link(other_file, target)
        desired = _hard(target, to_file)

        assert HARD.already_satisfied(desired, inspect(str(target))) is False

    def test_symlink_to_destination_not_satisfied(self, to_file: Path, target: Path) -> None:
        """A symlink pointing at the destination is not a hard link."""
        target.symlink_to(to_file)
        desired = _hard(target, to_file)

        assert HARD.already_satisfied(desired, inspect(str(target))) is False

    def test_missing_destination(self, tmp_path: Path, target: Path, other_file: Path) -> None:
        """Nothing satisfies a hard link to a missing destination."""
        os.link(other_file, target)
        desired = _hard(target, tmp_path / "missing")

        assert HARD.already_satisfied(desired, inspect(str(target))) is False


class TestHardPreflight:
    """Tests for the hard preflight check."""

    def test_accepts_regular_file(self, to_file: Path, target: Path) -> None:
        """An existing regular destination passes."""
        assert HARD.preflight(_hard(target, to_file)) is None

    def test_missing_destination(self, tmp_path: Path, target: Path) -> None:
        """A missing destination is refused with NOT_FOUND."""
        missing = tmp_path / "missing"

        refusal = HARD.preflight(_hard(target, missing))

        assert refusal is not None
        assert refusal.kind == ErrorKind.NOT_FOUND
        assert refusal.path == str(missing)

    def test_directory_destination(self, tmp_path: Path, target: Path) -> None:
        """A directory destination is refused with OPERATION_NOT_PERMITTED."""
        directory = tmp_path / "dir"
        directory.mkdir()

        refusal = HARD.preflight(_hard(target, directory))

        assert refusal is not None
        assert refusal.kind == ErrorKind.OPERATION_NOT_PERMITTED


class TestHardCreate:
    """Tests for hard link creation."""

    def test_creates_hard_link(self, to_file: Path, target: Path) -> None:
        """The target shares the destination's inode."""
        HARD.create(_hard(target, to_file), None)

        assert not target.is_symlink()
        assert os.path.samefile(target, to_file)

    def test_symlink_destination_is_replicated(
        self, tmp_path: Path, other_file: Path, target: Path
    ) -> None:
        """A symlink destination yields a symlink with the same destination."""
        to_link = tmp_path / "to_link"
        to_link.symlink_to(other_file)

        HARD.create(_hard(target, to_link), None)

        assert target.is_symlink()
        assert os.readlink(target) == str(other_file)

    def test_long_target_name(self, tmp_path: Path, to_file: Path) -> None:
        """Hard links also work for target names close to NAME_MAX."""
        target = tmp_path / ("h" * 255)

        HARD.create(_hard(target, to_file), None)

        assert os.path.samefile(target, to_file)

    def test_cross_device_is_not_permitted(self, to_file: Path, target: Path) -> None:
        """EXDEV from link() is classified as OPERATION_NOT_PERMITTED."""
        cross_device = OSError(errno.EXDEV, "Invalid cross-device link")

        with (
            patch("linkctl.links.strategies.os.link", side_effect=cross_device),
            pytest.raises(LinkError) as exc_info,
        ):
            HARD.create(_hard(target, to_file), None)

        assert exc_info.value.kind == ErrorKind.OPERATION_NOT_PERMITTED
        assert not target.exists()
