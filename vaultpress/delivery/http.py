"""HTTP delivery to a site backend via httpx.

Endpoints, relative to the destination URL:
    POST /api/upload         {"notes": [...]}   -> {"api": "ok"}
    POST /api/upload-assets  {"assets": [...]}
    GET  /api/ping                              -> {"ok": true}
"""

from __future__ import annotations

import base64
import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

import httpx

from vaultpress.config.models import DestinationConfig
from vaultpress.models import PublishableDocument, ResolvedAsset
from vaultpress.publish.models import DeliveryError

logger = logging.getLogger(__name__)


def _endpoint(destination: DestinationConfig, path: str) -> str:
    return f"{destination.url.rstrip('/')}{path}"


def _headers(destination: DestinationConfig) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "x-api-key": destination.resolve_api_key(),
    }


def _to_iso(value: Any) -> str | None:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).isoformat()
    if isinstance(value, str) and value.strip():
        try:
            return _to_iso(datetime.fromisoformat(value.strip()))
        except ValueError:
            return None
    return None


def _to_tags(tags: Any) -> list[str]:
    if isinstance(tags, str):
        items = tags.split(",")
    elif isinstance(tags, (list, tuple)):
        items = [str(t) for t in tags if t is not None]
    else:
        return []
    return [t.strip() for t in items if t.strip()]


def build_api_note(note: PublishableDocument, now: datetime | None = None) -> dict[str, Any]:
    """Payload for one note. Route and id come from the computed routing."""
    if note.routing is None:
        raise ValueError(f"note {note.source_path!r} has no routing")
    fm = note.frontmatter.flat
    now_iso = (now or datetime.now(timezone.utc)).isoformat()

    published_at = _to_iso(fm.get("publishedAt")) or _to_iso(fm.get("date")) or now_iso
    updated_at = _to_iso(fm.get("updatedAt")) or published_at
    title = fm.get("title")

    return {
        "id": note.routing.id,
        "slug": note.routing.slug,
        "route": note.routing.full_path,
        "relativePath": note.relative_path,
        "vaultPath": note.source_path,
        "markdown": note.content,
        "frontmatter": {
            "title": str(title) if title else note.title,
            "description": str(fm.get("description") or ""),
            "date": _to_iso(fm.get("date")) or published_at,
            "tags": _to_tags(fm.get("tags")),
        },
        "publishedAt": published_at,
        "updatedAt": updated_at,
    }


def build_api_asset(asset: ResolvedAsset) -> dict[str, str]:
    return {
        "relativePath": asset.relative_asset_path,
        "vaultPath": asset.vault_path,
        "fileName": asset.file_name,
        "mimeType": asset.mime_type,
        "contentBase64": base64.b64encode(asset.content).decode("ascii"),
    }


class _HttpClientMixin:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    def _client(self, destination: DestinationConfig) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=destination.timeout)

    async def _post(self, destination: DestinationConfig, path: str, payload: dict) -> httpx.Response:
        url = _endpoint(destination, path)
        try:
            async with self._client(destination) as client:
                resp = await client.post(url, json=payload, headers=_headers(destination))
        except httpx.HTTPError as exc:
            raise DeliveryError(destination.id, cause=exc) from exc

        if not resp.is_success:
            logger.error("POST %s -> %d", url, resp.status_code)
            raise DeliveryError(
                destination.id,
                f"HTTP {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )
        logger.debug("POST %s -> %d", url, resp.status_code)
        return resp


class HttpNoteUploader(_HttpClientMixin):
    """DeliverySink posting a destination's notes in a single request."""

    async def deliver(
        self, destination: DestinationConfig, notes: list[PublishableDocument]
    ) -> None:
        if not notes:
            return
        payload = {"notes": [build_api_note(n) for n in notes]}
        resp = await self._post(destination, "/api/upload", payload)

        try:
            ack = resp.json()
        except ValueError as exc:
            raise DeliveryError(
                destination.id, "malformed acknowledgement", cause=exc,
                status_code=resp.status_code, body=resp.text,
            ) from exc
        if not isinstance(ack, dict) or ack.get("api") != "ok":
            raise DeliveryError(
                destination.id, f"upload API returned an error: {ack!r}",
                status_code=resp.status_code, body=resp.text,
            )
        logger.info("uploaded %d note(s) to %s", len(notes), destination.id)


class HttpAssetUploader(_HttpClientMixin):
    """AssetUploader posting base64-encoded files."""

    async def upload(self, destination: DestinationConfig, assets: list[ResolvedAsset]) -> None:
        if not assets:
            return
        await self._post(destination, "/api/upload-assets", {"assets": [build_api_asset(a) for a in assets]})
        logger.info("uploaded %d asset(s) to %s", len(assets), destination.id)


class ConnectionStatus(str, Enum):
    success = "success"
    invalid_url = "invalid-url"
    missing_api_key = "missing-api-key"
    http_error = "http-error"
    invalid_json = "invalid-json"
    unexpected_response = "unexpected-response"
    failure = "failure"


async def check_connection(
    destination: DestinationConfig, transport: httpx.AsyncBaseTransport | None = None
) -> ConnectionStatus:
    """Ping the destination and check it answers ``{"ok": true}``."""
    if not destination.url.strip():
        return ConnectionStatus.invalid_url
    api_key = destination.resolve_api_key()
    if not api_key:
        return ConnectionStatus.missing_api_key

    url = _endpoint(destination, "/api/ping")
    try:
        async with httpx.AsyncClient(transport=transport, timeout=destination.timeout) as client:
            resp = await client.get(url, headers={"x-api-key": api_key})
    except httpx.HTTPError as exc:
        logger.warning("ping %s failed: %s", url, exc)
        return ConnectionStatus.failure

    if not resp.is_success:
        logger.warning("ping %s -> %d", url, resp.status_code)
        return ConnectionStatus.http_error
    try:
        body = resp.json()
    except ValueError:
        return ConnectionStatus.invalid_json
    if not isinstance(body, dict) or body.get("ok") is not True:
        return ConnectionStatus.unexpected_response
    return ConnectionStatus.success
