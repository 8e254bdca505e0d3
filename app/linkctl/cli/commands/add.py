"""Add command implementation.

Records a link in the manifest without touching the filesystem.
"""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from linkctl.core.manifest import (
    ManifestError,
    add_link_entry,
    load_manifest,
    manifest_exists,
    new_manifest,
    save_manifest,
)
from linkctl.models.manifest import LinkEntry
from linkctl.utils.formatting import print_error, print_info, print_success, print_warning


def add_link(
    target: Annotated[str, typer.Argument(help="Path of the link (may start with ~).")],
    destination: Annotated[
        str,
        typer.Argument(help="What the link points at. Use '' with --delete."),
    ] = "",
    hard: Annotated[
        bool,
        typer.Option("--hard", "-H", help="Record a hard link instead of a symbolic link."),
    ] = False,
    owner: Annotated[
        str | None,
        typer.Option("--owner", "-o", help="Owner name or uid (symbolic links only)."),
    ] = None,
    group: Annotated[
        str | None,
        typer.Option("--group", "-g", help="Group name or gid (symbolic links only)."),
    ] = None,
    delete: Annotated[
        bool,
        typer.Option("--delete", "-d", help="Record the link for removal."),
    ] = False,
    reason: Annotated[
        str | None,
        typer.Option("--reason", "-r", help="Why this link is tracked."),
    ] = None,
    manifest_path: Annotated[
        Path | None,
        typer.Option(
            "--manifest",
            "-m",
            help="Manifest file (default: ~/.config/linkctl/links.toml).",
        ),
    ] = None,
) -> None:
    """Add or replace a link entry in the manifest.

    The manifest is created if it does not exist yet. Run
    'linkctl apply' afterwards to converge the system.
    """
    if manifest_exists(manifest_path):
        try:
            manifest = load_manifest(manifest_path)
        except ManifestError as e:
            print_error(f"Failed to load manifest: {e}")
            raise typer.Exit(code=1) from e
    else:
        manifest = new_manifest()

    try:
        entry = LinkEntry(
            to=destination,
            link_type="hard" if hard else "symbolic",
            owner=owner,
            group=group,
            action="delete" if delete else "create",
            reason=reason,
        )
    except ValidationError as e:
        print_error(f"Invalid link entry: {e.errors()[0]['msg']}")
        raise typer.Exit(code=1) from e

    if hard and (owner or group):
        print_warning("Owner and group are ignored for hard links.")

    replaced = target in manifest.links
    manifest = add_link_entry(manifest, target, entry)

    try:
        saved_path = save_manifest(manifest, manifest_path)
    except ManifestError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    verb = "Updated" if replaced else "Added"
    print_success(f"{verb} {target} in {saved_path}")
    print_info("Run 'linkctl apply' to converge the system.")
