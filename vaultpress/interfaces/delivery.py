"""Delivery interfaces for notes and assets."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from vaultpress.config.models import DestinationConfig
from vaultpress.models import PublishableDocument, ResolvedAsset


@runtime_checkable
class DeliverySink(Protocol):
    """Sends one destination's notes. Raises on failure; never retries."""

    async def deliver(
        self, destination: DestinationConfig, notes: list[PublishableDocument]
    ) -> None: ...


@runtime_checkable
class AssetUploader(Protocol):
    async def upload(self, destination: DestinationConfig, assets: list[ResolvedAsset]) -> None: ...
