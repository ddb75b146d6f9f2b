"""Filesystem-backed vault: collects markdown notes and locates embedded assets."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import re
from functools import cached_property
from pathlib import Path, PurePosixPath

import yaml

from vaultpress.config.models import FolderConfig
from vaultpress.models import AssetReference, RawDocument, ResolvedAsset
from vaultpress.publish.models import CollectionError, ConfigurationError

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?", re.DOTALL | re.MULTILINE)
_NOTE_SUFFIXES = {".md"}


def parse_frontmatter(content: str) -> tuple[dict, str]:
    """Split leading YAML frontmatter from the markdown body.

    Raises yaml.YAMLError on malformed YAML; a non-mapping block yields {}.
    """
    content = content.removeprefix("\ufeff")
    m = _FRONTMATTER_RE.match(content)
    if not m:
        return {}, content
    loaded = yaml.safe_load(m.group(1))
    metadata = loaded if isinstance(loaded, dict) else {}
    return {str(k): v for k, v in metadata.items()}, content[m.end():]


def _normalize_folder(folder: str | None) -> str:
    return (folder or "").strip().replace("\\", "/").strip("/")


class FilesystemVault:
    """Reads an Obsidian vault directory.

    Hidden directories (``.obsidian``, ``.trash``) are never scanned.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        if not self.root.is_dir():
            raise ConfigurationError(f"vault path is not a directory: {self.root}")

    # -- DocumentSource ------------------------------------------------------

    async def collect(self, folder: FolderConfig) -> list[RawDocument]:
        return await asyncio.to_thread(self._collect_sync, folder)

    def _collect_sync(self, folder: FolderConfig) -> list[RawDocument]:
        folder_rel = _normalize_folder(folder.vault_folder)
        if not folder_rel:
            return []
        folder_dir = self.root / folder_rel
        if not folder_dir.is_dir():
            logger.warning("folder %s not found in vault: %s", folder.id, folder_rel)
            return []

        docs: list[RawDocument] = []
        for path in self._walk(folder_dir):
            if path.suffix.lower() not in _NOTE_SUFFIXES:
                continue
            source_path = path.relative_to(self.root).as_posix()
            try:
                text = path.read_text(encoding="utf-8-sig")
                frontmatter, body = parse_frontmatter(text)
            except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
                raise CollectionError(folder.id, exc) from exc
            docs.append(RawDocument(
                source_path=source_path,
                relative_path=path.relative_to(folder_dir).as_posix(),
                content=body,
                frontmatter=frontmatter,
                folder=folder,
            ))

        logger.debug("collected %d note(s) from %s", len(docs), folder_rel)
        return docs

    def _walk(self, directory: Path) -> list[Path]:
        files: list[Path] = []
        for child in sorted(directory.iterdir()):
            if child.name.startswith("."):
                continue
            if child.is_dir():
                files.extend(self._walk(child))
            elif child.is_file():
                files.append(child)
        return files

    # -- AssetsVault ---------------------------------------------------------

    @cached_property
    def _all_files(self) -> list[str]:
        return [p.relative_to(self.root).as_posix() for p in self._walk(self.root)]

    async def resolve(
        self,
        asset: AssetReference,
        assets_folder: str,
        vault_fallback: bool,
    ) -> ResolvedAsset | None:
        return await asyncio.to_thread(self._resolve_sync, asset, assets_folder, vault_fallback)

    def _resolve_sync(
        self, asset: AssetReference, assets_folder: str, vault_fallback: bool
    ) -> ResolvedAsset | None:
        target = asset.target.strip().replace("\\", "/").lstrip("/")
        if not target:
            return None
        folder = _normalize_folder(assets_folder)

        found: str | None = None
        if folder:
            in_folder = [f for f in self._all_files if _is_under(f, folder)]
            found = _find_match(in_folder, target)
            if found:
                logger.debug("asset %s found in assets folder: %s", target, found)
        if found is None and vault_fallback:
            found = _find_match(self._all_files, target)
            if found:
                logger.debug("asset %s found by vault fallback: %s", target, found)
        if found is None:
            return None

        file_name = PurePosixPath(found).name
        mime_type, _ = mimetypes.guess_type(file_name)
        return ResolvedAsset(
            vault_path=found,
            file_name=file_name,
            relative_asset_path=_relative_asset_path(found, folder),
            mime_type=mime_type or "application/octet-stream",
            content=(self.root / found).read_bytes(),
        )


def _is_under(path: str, folder: str) -> bool:
    return path == folder or path.startswith(folder + "/")


def _find_match(files: list[str], target: str) -> str | None:
    """Exact path, then path suffix, then bare file name (case-insensitive)."""
    lower = target.lower()
    base_name = lower.rsplit("/", 1)[-1]
    for f in files:
        if f.lower() == lower:
            return f
    for f in files:
        if f.lower().endswith("/" + lower):
            return f
    for f in files:
        if f.lower().rsplit("/", 1)[-1] == base_name:
            return f
    return None


def _relative_asset_path(path: str, folder: str) -> str:
    """assets/gods/Tenebra.jpg with folder 'assets' -> gods/Tenebra.jpg"""
    if folder and path.startswith(folder + "/"):
        return path[len(folder) + 1:]
    return path
