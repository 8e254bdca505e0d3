"""Data models for linkctl.

This module exports the manifest data structures.
"""

from linkctl.models.manifest import LinkEntry, Manifest, ManifestMeta

__all__ = [
    "LinkEntry",
    "Manifest",
    "ManifestMeta",
]
