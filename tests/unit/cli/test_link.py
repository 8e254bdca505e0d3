"""Unit tests for link and unlink commands.

Tests for converging a single link from the command line.
"""

import os
from pathlib import Path

from linkctl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestLinkCommandHelp:
    """Tests for link command help."""

    def test_link_help(self) -> None:
        """link --help shows the command options."""
        result = runner.invoke(app, ["link", "--help"])

        assert result.exit_code == 0
        assert "--hard" in result.output
        assert "--dry-run" in result.output


class TestLinkCommand:
    """Tests for the link command."""

    def test_creates_symlink(self, to_file: Path, target: Path) -> None:
        """link creates a symbolic link."""
        result = runner.invoke(app, ["link", str(target), str(to_file)])

        assert result.exit_code == 0
        assert os.readlink(target) == str(to_file)

    def test_second_run_is_ok(self, to_file: Path, target: Path) -> None:
        """Running link twice succeeds without changes."""
        runner.invoke(app, ["link", str(target), str(to_file)])

        result = runner.invoke(app, ["link", str(target), str(to_file)])

        assert result.exit_code == 0
        assert "ok" in result.output

    def test_creates_hard_link(self, to_file: Path, target: Path) -> None:
        """link --hard creates a hard link."""
        result = runner.invoke(app, ["link", str(target), str(to_file), "--hard"])

        assert result.exit_code == 0
        assert os.path.samefile(target, to_file)
        assert not target.is_symlink()

    def test_hard_link_warns_about_owner(self, to_file: Path, target: Path) -> None:
        """link --hard with --owner warns that ownership is ignored."""
        result = runner.invoke(
            app, ["link", str(target), str(to_file), "--hard", "--owner", "root"]
        )

        assert result.exit_code == 0
        assert "Owner and group are ignored" in result.output
        assert os.path.samefile(target, to_file)

    def test_dry_run_writes_nothing(self, to_file: Path, target: Path) -> None:
        """link --dry-run leaves the filesystem untouched."""
        result = runner.invoke(app, ["link", str(target), str(to_file), "--dry-run"])

        assert result.exit_code == 0
        assert "Dry-run mode" in result.output
        assert not os.path.lexists(target)

    def test_directory_target_fails(self, to_file: Path, target: Path) -> None:
        """A directory at the target exits non-zero and is kept."""
        target.mkdir()

        result = runner.invoke(app, ["link", str(target), str(to_file)])

        assert result.exit_code == 1
        assert "is_a_directory" in result.output
        assert target.is_dir()

    def test_missing_hard_destination_fails(self, tmp_path: Path, target: Path) -> None:
        """A hard link to a missing destination exits non-zero."""
        result = runner.invoke(app, ["link", str(target), str(tmp_path / "missing"), "--hard"])

        assert result.exit_code == 1
        assert "not_found" in result.output
        assert not os.path.lexists(target)

    def test_unknown_owner_fails_after_linking(self, to_file: Path, target: Path) -> None:
        """An ownership failure exits non-zero but keeps the link."""
        result = runner.invoke(
            app,
            ["link", str(target), str(to_file), "--owner", "linkctl-no-such-user"],
        )

        assert result.exit_code == 1
        assert "Ownership not applied" in result.output
        assert target.is_symlink()


class TestUnlinkCommand:
    """Tests for the unlink command."""

    def test_removes_symlink(self, to_file: Path, target: Path) -> None:
        """unlink removes a symbolic link."""
        target.symlink_to(to_file)

        result = runner.invoke(app, ["unlink", str(target)])

        assert result.exit_code == 0
        assert not os.path.lexists(target)
        assert to_file.exists()

    def test_absent_is_ok(self, target: Path) -> None:
        """unlink of a missing path succeeds."""
        result = runner.invoke(app, ["unlink", str(target)])
        assert result.exit_code == 0

    def test_regular_file_refused(self, other_file: Path) -> None:
        """unlink refuses to remove a regular file."""
        result = runner.invoke(app, ["unlink", str(other_file)])

        assert result.exit_code == 1
        assert "link_type_mismatch" in result.output
        assert other_file.read_text() == "eek"

    def test_hard_unlink(self, to_file: Path, target: Path) -> None:
        """unlink --hard removes a hard link."""
        os.link(to_file, target)

        result = runner.invoke(app, ["unlink", str(target), "--hard"])

        assert result.exit_code == 0
        assert not target.exists()
        assert to_file.read_text() == "woohoo"

    def test_dry_run_keeps_link(self, to_file: Path, target: Path) -> None:
        """unlink --dry-run leaves the link in place."""
        target.symlink_to(to_file)

        result = runner.invoke(app, ["unlink", str(target), "-n"])

        assert result.exit_code == 0
        assert target.is_symlink()
