"""vaultpress - publish Obsidian vault folders to a website."""

from vaultpress.config import VaultpressConfig, load_config
from vaultpress.models import PublishableDocument, RawDocument
from vaultpress.publish import (
    AssetPublisher,
    PublicationOrchestrator,
    PublicationResult,
    PublicationStatus,
    prepare_document,
)
from vaultpress.transform import TransformPipeline, default_pipeline

__version__ = "0.1.0"

__all__ = [
    "AssetPublisher",
    "PublicationOrchestrator",
    "PublicationResult",
    "PublicationStatus",
    "PublishableDocument",
    "RawDocument",
    "TransformPipeline",
    "VaultpressConfig",
    "default_pipeline",
    "load_config",
    "prepare_document",
]
