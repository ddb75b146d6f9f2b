"""Detects ``[[path#subpath|alias]]`` wikilinks, leaving ``![[...]]`` embeds to the asset detector."""

from __future__ import annotations

import re

from vaultpress.models import PublishableDocument, WikilinkKind, WikilinkReference

from .pipeline import Transform

_WIKILINK_RE = re.compile(r"\[\[([^\]]+)\]\]")
_FILE_EXT_RE = re.compile(
    r"\.(png|jpe?g|gif|webp|svg|mp3|wav|flac|ogg|mp4|webm|mkv|mov|pdf|md|markdown)$"
)


def infer_kind(path: str) -> WikilinkKind:
    if _FILE_EXT_RE.search(path.lower()):
        return WikilinkKind.file
    return WikilinkKind.note


def _split_once(value: str, separator: str) -> tuple[str, str | None]:
    head, sep, tail = value.partition(separator)
    return (head, tail) if sep else (value, None)


def _non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _is_embed(markdown: str, start: int) -> bool:
    return start > 0 and markdown[start - 1] == "!"


def detect_wikilinks(markdown: str) -> list[WikilinkReference]:
    wikilinks: list[WikilinkReference] = []

    for m in _WIKILINK_RE.finditer(markdown):
        inner = m.group(1).strip()
        if not inner or _is_embed(markdown, m.start()):
            continue

        target_part, alias_part = _split_once(inner, "|")
        target = target_part.strip()
        if not target:
            continue

        path_part, subpath_part = _split_once(target, "#")
        path = path_part.strip()
        if not path:
            continue

        wikilinks.append(WikilinkReference(
            raw=m.group(0),
            target=target,
            path=path,
            subpath=_non_empty(subpath_part),
            alias=_non_empty(alias_part),
            kind=infer_kind(path),
        ))

    return wikilinks


class WikilinkDetector(Transform):
    def apply(self, note: PublishableDocument) -> PublishableDocument:
        wikilinks = detect_wikilinks(note.content)
        if not wikilinks:
            return note
        return note.model_copy(update={"wikilinks": wikilinks})
