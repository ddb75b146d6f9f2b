"""Publication orchestration: run the pipeline, deliver per destination."""

from .assets import AssetPublisher
from .models import (
    AssetPublishFailure,
    AssetsPublicationResult,
    AssetsPublicationStatus,
    CollectionError,
    ConfigurationError,
    DeliveryError,
    PipelineError,
    PublicationResult,
    PublicationStatus,
    PublishError,
)
from .orchestrator import PublicationOrchestrator, prepare_document

__all__ = [
    "AssetPublishFailure",
    "AssetPublisher",
    "AssetsPublicationResult",
    "AssetsPublicationStatus",
    "CollectionError",
    "ConfigurationError",
    "DeliveryError",
    "PipelineError",
    "PublicationOrchestrator",
    "PublicationResult",
    "PublicationStatus",
    "PublishError",
    "prepare_document",
]
