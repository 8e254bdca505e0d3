"""linkctl - Declarative symbolic and hard link management."""

__version__ = "0.1.0"
