"""Result models and errors for publication runs."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from vaultpress.models import AssetReference, PublishableDocument


class PublishError(Exception):
    """Base class for publication failures."""


class ConfigurationError(PublishError):
    """Destinations or folders are missing or inconsistent."""


class CollectionError(PublishError):
    """The document source failed while reading a folder."""

    def __init__(self, folder_id: str, cause: Exception) -> None:
        self.folder_id = folder_id
        super().__init__(f"collecting folder {folder_id!r} failed: {cause}")
        self.__cause__ = cause


class PipelineError(PublishError):
    """A note stage raised while preparing a document."""

    def __init__(self, source_path: str, cause: Exception) -> None:
        self.source_path = source_path
        super().__init__(f"preparing note {source_path!r} failed: {cause}")
        self.__cause__ = cause


class DeliveryError(PublishError):
    """A destination rejected or failed to acknowledge a delivery."""

    def __init__(
        self,
        destination_id: str,
        message: str | None = None,
        *,
        cause: Exception | None = None,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        self.destination_id = destination_id
        self.status_code = status_code
        self.body = body
        detail = message or (str(cause) if cause else "delivery failed")
        super().__init__(f"delivery to {destination_id!r} failed: {detail}")
        if cause is not None:
            self.__cause__ = cause


class PublicationStatus(str, Enum):
    success = "success"
    no_config = "noConfig"
    missing_destination = "missingVpsConfig"
    error = "error"


class PublicationResult(BaseModel):
    """Outcome of one orchestrator run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: PublicationStatus
    published_count: int = 0
    notes: list[PublishableDocument] = Field(default_factory=list)
    folders_without_destination: list[str] = Field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status is PublicationStatus.success


class AssetPublishFailure(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    note_id: str
    asset: AssetReference
    reason: Literal["not-found", "resolve-error", "upload-error"]
    error: Exception | None = None


class AssetsPublicationStatus(str, Enum):
    success = "success"
    no_assets = "noAssets"


class AssetsPublicationResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: AssetsPublicationStatus
    published_assets_count: int = 0
    failures: list[AssetPublishFailure] = Field(default_factory=list)
