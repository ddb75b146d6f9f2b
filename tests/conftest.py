"""Shared test fixtures for vaultpress."""

import pytest

from vaultpress.config.models import (
    DestinationConfig,
    FolderConfig,
    IgnoreRule,
    SanitizationRules,
    VaultpressConfig,
)
from vaultpress.models import PublishableDocument, RawDocument
from vaultpress.transform import normalize_frontmatter


@pytest.fixture
def destination():
    return DestinationConfig(id="main", name="Main site", url="https://site.test", api_key="secret")


@pytest.fixture
def folder():
    return FolderConfig(id="blog", vault_folder="Blog", route_base="/blog", destination_id="main")


@pytest.fixture
def sample_config(destination, folder):
    return VaultpressConfig(
        destinations=[destination],
        folders=[folder],
        ignore_rules=[IgnoreRule(property="publish", ignore_if=False)],
    )


@pytest.fixture
def make_raw(folder):
    """Factory for RawDocuments inside the ``blog`` folder."""

    def _make(relative_path="Post.md", content="Hello", frontmatter=None, folder_config=None):
        f = folder_config or folder
        return RawDocument(
            source_path=f"{f.vault_folder}/{relative_path}",
            relative_path=relative_path,
            content=content,
            frontmatter=frontmatter or {},
            folder=f,
        )

    return _make


@pytest.fixture
def make_note(folder, destination):
    """Factory for PublishableDocuments before any stage has run."""

    def _make(content="", frontmatter=None, relative_path="Post.md", sanitization=None, route_base=None):
        f = folder
        updates = {}
        if sanitization is not None:
            updates["sanitization"] = sanitization
        if route_base is not None:
            updates["route_base"] = route_base
        if updates:
            f = folder.model_copy(update=updates)
        return PublishableDocument(
            note_id="n1",
            title=relative_path.rsplit("/", 1)[-1].removesuffix(".md"),
            source_path=f"Blog/{relative_path}",
            relative_path=relative_path,
            content=content,
            frontmatter=normalize_frontmatter(frontmatter or {}),
            folder=f,
            destination=destination,
        )

    return _make


@pytest.fixture
def no_sanitization():
    return SanitizationRules(remove_fenced_code_blocks=False)
