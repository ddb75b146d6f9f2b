"""Computes the published route of a note from its folder-relative path."""

from __future__ import annotations

import re
import unicodedata

from vaultpress.models import PublishableDocument, RoutingInfo

from .pipeline import Transform

FALLBACK_SLUG = "note"

_COMBINING_MARKS_RE = re.compile("[\u0300-\u036f]")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9\s]")
_MULTI_SPACE_RE = re.compile(r"\s{2,}")
_SPACE_RE = re.compile(r"\s")
_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_MULTI_SLASH_RE = re.compile(r"/{2,}")


def slugify_segment(segment: str) -> str:
    """Déjà Vu Notes -> deja-vu-notes"""
    text = unicodedata.normalize("NFD", segment)
    text = _COMBINING_MARKS_RE.sub("", text)
    text = _NON_ALNUM_RE.sub("", text)
    text = _MULTI_SPACE_RE.sub(" ", text)
    text = text.strip().lower()
    return _SPACE_RE.sub("-", text)


def normalize_route_base(route_base: str) -> str:
    base = (route_base or "").strip()
    if not base:
        return ""
    base = base.strip("/")
    return f"/{base}" if base else "/"


def _path_segments(relative_path: str) -> list[str]:
    normalized = relative_path.replace("\\", "/").strip("/")
    return [s for s in normalized.split("/") if s]


def compute_routing(relative_path: str, route_base: str) -> RoutingInfo:
    base = normalize_route_base(route_base)
    segments = _path_segments(relative_path)

    if not segments:
        slug = FALLBACK_SLUG
        return RoutingInfo(
            id=slug,
            slug=slug,
            path="",
            route_base=base,
            full_path=_join_route(base, "", slug),
        )

    file_base = _EXTENSION_RE.sub("", segments[-1])
    slug = slugify_segment(file_base)

    slugged_dirs = [s for s in (slugify_segment(d) for d in segments[:-1]) if s]
    path = "/".join(slugged_dirs)

    return RoutingInfo(
        id=f"{path}/{slug}" if path else slug,
        slug=slug,
        path=path,
        route_base=base,
        full_path=_join_route(base, path, slug),
    )


def _join_route(*parts: str) -> str:
    joined = "/".join(p for p in parts if p)
    return _MULTI_SLASH_RE.sub("/", f"/{joined}")


class RoutingComputer(Transform):
    def apply(self, note: PublishableDocument) -> PublishableDocument:
        routing = compute_routing(note.relative_path, note.folder.route_base)
        return note.model_copy(update={"routing": routing})
