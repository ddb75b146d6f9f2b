"""Vault access: note collection and asset lookup."""

from .filesystem import FilesystemVault, parse_frontmatter

__all__ = ["FilesystemVault", "parse_frontmatter"]
