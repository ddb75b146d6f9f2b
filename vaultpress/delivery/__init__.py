"""Delivery collaborators: HTTP upload, connection check, dry-run recording."""

from .http import (
    ConnectionStatus,
    HttpAssetUploader,
    HttpNoteUploader,
    build_api_asset,
    build_api_note,
    check_connection,
)
from .recording import RecordingSink

__all__ = [
    "ConnectionStatus",
    "HttpAssetUploader",
    "HttpNoteUploader",
    "RecordingSink",
    "build_api_asset",
    "build_api_note",
    "check_connection",
]
