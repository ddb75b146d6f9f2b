"""Resolves embedded assets of published notes and uploads them."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from vaultpress.config.models import DestinationConfig
from vaultpress.interfaces import AssetsVault, AssetUploader, ProgressSink
from vaultpress.models import AssetReference, PublishableDocument, ResolvedAsset

from .models import AssetPublishFailure, AssetsPublicationResult, AssetsPublicationStatus

logger = logging.getLogger(__name__)


class AssetPublisher:
    """Uploads every distinct asset embedded in a set of notes.

    Targets are deduplicated case-insensitively; the first note embedding an
    asset is the one reported in failures.
    """

    def __init__(self, vault: AssetsVault, uploader: AssetUploader) -> None:
        self.vault = vault
        self.uploader = uploader

    async def execute(
        self,
        destination: DestinationConfig,
        notes: Sequence[PublishableDocument],
        *,
        assets_folder: str,
        vault_fallback: bool,
        progress: ProgressSink | None = None,
    ) -> AssetsPublicationResult:
        unique = _unique_assets(notes)
        if not unique:
            return AssetsPublicationResult(status=AssetsPublicationStatus.no_assets)

        failures: list[AssetPublishFailure] = []
        resolved: list[tuple[str, AssetReference, ResolvedAsset]] = []

        for note_id, asset in unique:
            try:
                found = await self.vault.resolve(asset, assets_folder, vault_fallback)
            except Exception as exc:
                logger.warning("could not resolve %s: %s", asset.target, exc)
                failures.append(AssetPublishFailure(
                    note_id=note_id, asset=asset, reason="resolve-error", error=exc,
                ))
                continue
            if found is None:
                logger.warning("asset not found: %s", asset.target)
                failures.append(AssetPublishFailure(note_id=note_id, asset=asset, reason="not-found"))
                continue
            resolved.append((note_id, asset, found))

        if progress is not None:
            progress.start(len(resolved))

        published = 0
        try:
            for note_id, asset, found in resolved:
                try:
                    await self.uploader.upload(destination, [found])
                    published += 1
                except Exception as exc:
                    logger.error("upload of %s failed: %s", found.vault_path, exc)
                    failures.append(AssetPublishFailure(
                        note_id=note_id, asset=asset, reason="upload-error", error=exc,
                    ))
                if progress is not None:
                    progress.advance(1)
        finally:
            if progress is not None:
                progress.finish()

        logger.info("published %d asset(s), %d failure(s)", published, len(failures))
        return AssetsPublicationResult(
            status=AssetsPublicationStatus.success,
            published_assets_count=published,
            failures=failures,
        )


def _unique_assets(notes: Sequence[PublishableDocument]) -> list[tuple[str, AssetReference]]:
    seen: set[str] = set()
    unique: list[tuple[str, AssetReference]] = []
    for note in notes:
        for asset in note.assets or []:
            key = asset.target.lower()
            if key in seen:
                continue
            seen.add(key)
            unique.append((note.note_id, asset))
    return unique
