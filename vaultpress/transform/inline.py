"""Renders Dataview-style inline expressions (`=this.prop`) from frontmatter."""

from __future__ import annotations

import json
import re
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vaultpress.models import InlineExpression, NormalizedMetadata, PublishableDocument

from .frontmatter import MISSING, resolve_path
from .pipeline import Transform

_INLINE_CODE_RE = re.compile(r"`([^`]*?)`")
_THIS_PREFIX = "this."


class InlineRenderResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    markdown: str
    expressions: list[InlineExpression] = Field(default_factory=list)


def render_value(value: Any) -> str:
    if value is MISSING or value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(_render_item(item) for item in value)
    return _render_scalar(value)


def _render_item(item: Any) -> str:
    if item is None:
        return "null"
    return render_value(item)


def _render_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def render_inline_expressions(markdown: str, frontmatter: NormalizedMetadata) -> InlineRenderResult:
    expressions: list[InlineExpression] = []

    def _replace(m: re.Match) -> str:
        code = m.group(1)
        trimmed = code.strip()
        if not trimmed.startswith("="):
            return m.group(0)

        expr = trimmed[1:].strip()
        if not expr.startswith(_THIS_PREFIX):
            return m.group(0)

        property_path = expr[len(_THIS_PREFIX):].strip()
        if not property_path:
            return m.group(0)

        value = resolve_path(frontmatter.nested, property_path)
        rendered = render_value(value)
        expressions.append(InlineExpression(
            raw=m.group(0),
            code=code,
            expression=expr,
            property_path=property_path,
            resolved_value=None if value is MISSING else value,
            rendered_text=rendered,
        ))
        return rendered

    rendered_markdown = _INLINE_CODE_RE.sub(_replace, markdown)
    return InlineRenderResult(markdown=rendered_markdown, expressions=expressions)


class InlineExpressionRenderer(Transform):
    def apply(self, note: PublishableDocument) -> PublishableDocument:
        result = render_inline_expressions(note.content, note.frontmatter)
        if not result.expressions:
            return note
        return note.model_copy(update={"content": result.markdown})
