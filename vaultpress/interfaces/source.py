"""Document source interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from vaultpress.config.models import FolderConfig
from vaultpress.models import AssetReference, RawDocument, ResolvedAsset


@runtime_checkable
class DocumentSource(Protocol):
    """Collects every candidate note of a folder. Applies no filtering."""

    async def collect(self, folder: FolderConfig) -> list[RawDocument]: ...


@runtime_checkable
class AssetsVault(Protocol):
    """Locates and reads embedded asset files."""

    async def resolve(
        self,
        asset: AssetReference,
        assets_folder: str,
        vault_fallback: bool,
    ) -> ResolvedAsset | None: ...
