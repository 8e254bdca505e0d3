"""Manifest models for declarative link configuration.

This module defines the Pydantic models representing the links.toml
structure that describes the desired set of links on a host.
"""

from __future__ import annotations

import os
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from linkctl.links.models import LinkAction, LinkDescriptor, LinkKind


class ManifestMeta(BaseModel):
    """Metadata section of the manifest.

    Attributes:
        version: Manifest schema version (e.g., "1.0").
        created: Timestamp when manifest was first created.
        updated: Timestamp when manifest was last modified.
    """

    model_config = ConfigDict(extra="forbid")

    version: Annotated[str, Field(description="Manifest schema version")] = "1.0"
    created: Annotated[datetime, Field(description="Timestamp when manifest was created")]
    updated: Annotated[datetime, Field(description="Timestamp when manifest was last modified")]


# Type aliases for link entries in the manifest
LinkTypeValue = Literal["symbolic", "hard"]
LinkActionValue = Literal["create", "delete"]


class LinkEntry(BaseModel):
    """Entry for a single link in the manifest.

    The target path is the key of the entry in the [links] table.

    Attributes:
        to: Link destination, kept exactly as written.
        link_type: "symbolic" (default) or "hard".
        owner: Optional owner name or uid (symbolic links only).
        group: Optional group name or gid (symbolic links only).
        action: "create" (default) or "delete".
        reason: Optional explanation for why this link is tracked.
    """

    model_config = ConfigDict(extra="forbid")

    to: Annotated[str, Field(description="Link destination")] = ""
    link_type: Annotated[LinkTypeValue, Field(description="Kind of link")] = "symbolic"
    owner: Annotated[str | int | None, Field(description="Owner name or uid")] = None
    group: Annotated[str | int | None, Field(description="Group name or gid")] = None
    action: Annotated[LinkActionValue, Field(description="Desired action")] = "create"
    reason: Annotated[str | None, Field(description="Reason for tracking")] = None

    @model_validator(mode="after")
    def validate_destination(self) -> LinkEntry:
        """Validate that create entries name a destination."""
        if self.action == "create" and not self.to:
            msg = "Link entries with action 'create' require a destination ('to')"
            raise ValueError(msg)
        return self

    def to_descriptor(self, target_path: str) -> LinkDescriptor:
        """Build the engine descriptor for this entry.

        Args:
            target_path: Manifest key; a leading ~ is expanded.

        Returns:
            LinkDescriptor for the link engine.
        """
        return LinkDescriptor(
            target_path=os.path.expanduser(target_path),
            destination=self.to,
            link_kind=LinkKind(self.link_type),
            owner=self.owner,
            group=self.group,
        )


class Manifest(BaseModel):
    """Complete manifest representing the desired links on a host.

    Attributes:
        meta: Metadata section with version and timestamps.
        links: Link entries keyed by target path, in declaration order.
    """

    model_config = ConfigDict(extra="forbid")

    meta: Annotated[ManifestMeta, Field(description="Manifest metadata")]
    links: Annotated[
        dict[str, LinkEntry],
        Field(default_factory=dict, description="Links keyed by target path"),
    ]

    def get_links(self, action: LinkActionValue | None = None) -> dict[str, LinkEntry]:
        """Get link entries, optionally filtered by action.

        Args:
            action: Filter by action ("create" or "delete"). If None, returns all.

        Returns:
            Dictionary of target paths to LinkEntry.
        """
        if action is None:
            return self.links
        return {path: entry for path, entry in self.links.items() if entry.action == action}

    def to_descriptors(self) -> list[tuple[LinkDescriptor, LinkAction]]:
        """Convert all entries to (descriptor, action) pairs in declaration order."""
        return [
            (entry.to_descriptor(path), LinkAction(entry.action))
            for path, entry in self.links.items()
        ]

    @property
    def link_count(self) -> int:
        """Total number of links tracked in the manifest."""
        return len(self.links)
