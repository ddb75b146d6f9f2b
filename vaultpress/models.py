"""Pydantic models for notes flowing through the publishing pipeline.

Every model is frozen: pipeline stages return updated copies via
``model_copy(update=...)`` and never touch their input.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from vaultpress.config.models import DestinationConfig, FolderConfig


class RawDocument(BaseModel):
    """A note as collected from the vault, before any processing."""

    model_config = ConfigDict(frozen=True)

    source_path: str = Field(description="Canonical path inside the vault")
    relative_path: str = Field(description="Path relative to the configured folder")
    content: str = ""
    frontmatter: dict[str, Any] = Field(default_factory=dict)
    folder: FolderConfig | None = None


class NormalizedMetadata(BaseModel):
    """Frontmatter in both its original flat form and as a nested tree."""

    model_config = ConfigDict(frozen=True)

    flat: dict[str, Any] = Field(default_factory=dict)
    nested: dict[str, Any] = Field(default_factory=dict)


class IgnoredByRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    property: str
    reason: Literal["ignoreIf", "ignoreValues"]
    matched_value: Any
    rule_index: int


class Eligibility(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_publishable: bool
    ignored_by_rule: IgnoredByRule | None = None


class AssetKind(str, Enum):
    image = "image"
    audio = "audio"
    video = "video"
    pdf = "pdf"
    other = "other"


class AssetDisplay(BaseModel):
    """Display options parsed from embed modifiers (``![[pic.png|right|300]]``)."""

    model_config = ConfigDict(frozen=True)

    alignment: Literal["left", "right", "center"] | None = None
    width: int | None = None
    classes: list[str] = Field(default_factory=list)
    raw_modifiers: list[str] = Field(default_factory=list)


class AssetReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: str
    target: str
    kind: AssetKind
    display: AssetDisplay = Field(default_factory=AssetDisplay)


class WikilinkKind(str, Enum):
    note = "note"
    file = "file"


class WikilinkReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: str
    target: str
    path: str
    subpath: str | None = None
    alias: str | None = None
    kind: WikilinkKind = WikilinkKind.note


class RoutingInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    slug: str
    path: str = ""
    route_base: str = ""
    full_path: str


class InlineExpression(BaseModel):
    """Diagnostic record of one rendered ``=this.x`` inline span."""

    model_config = ConfigDict(frozen=True)

    raw: str
    code: str
    expression: str
    property_path: str
    resolved_value: Any = None
    rendered_text: str


class PublishableDocument(BaseModel):
    """A note accepted for publication, enriched stage by stage."""

    model_config = ConfigDict(frozen=True)

    note_id: str
    title: str
    source_path: str
    relative_path: str
    content: str
    frontmatter: NormalizedMetadata
    folder: FolderConfig
    destination: DestinationConfig
    assets: list[AssetReference] | None = None
    wikilinks: list[WikilinkReference] | None = None
    routing: RoutingInfo | None = None


class ResolvedAsset(BaseModel):
    """An embedded asset located in the vault, ready for upload."""

    model_config = ConfigDict(frozen=True)

    vault_path: str
    file_name: str
    relative_asset_path: str = Field(description="Route of the asset on the site")
    mime_type: str = "application/octet-stream"
    content: bytes = b""
