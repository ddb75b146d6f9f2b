"""Detects Obsidian embeds (``![[file.png|right|300]]``) and their display modifiers."""

from __future__ import annotations

import re

from vaultpress.models import AssetDisplay, AssetKind, AssetReference, PublishableDocument

from .pipeline import Transform

_EMBED_RE = re.compile(r"!\[\[([^\]]+)\]\]")
_WIDTH_RE = re.compile(r"[0-9]+")

_KIND_PATTERNS: list[tuple[AssetKind, re.Pattern]] = [
    (AssetKind.image, re.compile(r"\.(png|jpe?g|gif|webp|svg)$")),
    (AssetKind.audio, re.compile(r"\.(mp3|wav|flac|ogg)$")),
    (AssetKind.video, re.compile(r"\.(mp4|webm|mkv|mov)$")),
    (AssetKind.pdf, re.compile(r"\.pdf$")),
]

_ALIGNMENTS = {"left": "left", "right": "right", "center": "center", "centre": "center"}


def classify_asset_kind(target: str) -> AssetKind:
    lower = target.lower()
    for kind, pattern in _KIND_PATTERNS:
        if pattern.search(lower):
            return kind
    return AssetKind.other


def parse_modifiers(tokens: list[str]) -> AssetDisplay:
    alignment: str | None = None
    width: int | None = None
    classes: list[str] = []
    raw_modifiers: list[str] = []

    for raw in tokens:
        token = raw.strip()
        if not token:
            continue
        raw_modifiers.append(token)

        if alignment is None and token.lower() in _ALIGNMENTS:
            alignment = _ALIGNMENTS[token.lower()]
            continue

        if width is None and _WIDTH_RE.fullmatch(token):
            width = int(token)
            continue

        # Anything else is kept as a CSS-like class
        classes.append(token)

    return AssetDisplay(
        alignment=alignment,
        width=width,
        classes=classes,
        raw_modifiers=raw_modifiers,
    )


def detect_assets(markdown: str) -> list[AssetReference]:
    assets: list[AssetReference] = []

    for m in _EMBED_RE.finditer(markdown):
        segments = [s.strip() for s in m.group(1).split("|")]
        segments = [s for s in segments if s]
        if not segments:
            continue

        target = segments[0]
        kind = classify_asset_kind(target)
        # No extension and no known kind: a note embed, not an asset
        if kind is AssetKind.other and "." not in target:
            continue

        assets.append(AssetReference(
            raw=m.group(0),
            target=target,
            kind=kind,
            display=parse_modifiers(segments[1:]),
        ))

    return assets


class AssetDetector(Transform):
    def apply(self, note: PublishableDocument) -> PublishableDocument:
        assets = detect_assets(note.content)
        if not assets:
            return note
        return note.model_copy(update={"assets": assets})
