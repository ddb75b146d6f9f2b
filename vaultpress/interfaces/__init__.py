"""Collaborator interfaces consumed by the publishing core."""

from vaultpress.interfaces.delivery import AssetUploader, DeliverySink
from vaultpress.interfaces.progress import IdGenerator, ProgressSink
from vaultpress.interfaces.source import AssetsVault, DocumentSource

__all__ = [
    "AssetUploader",
    "AssetsVault",
    "DeliverySink",
    "DocumentSource",
    "IdGenerator",
    "ProgressSink",
]
