"""Strips configured markdown regions before publication."""

import re

from vaultpress.config.models import SanitizationRules
from vaultpress.models import PublishableDocument

from .pipeline import Transform

# Opening fence line through the nearest closing fence at start of line
_FENCED_BACKTICKS_RE = re.compile(r"^```[^\n]*\n[\s\S]*?^```[ \t]*\n?", re.MULTILINE)
_FENCED_TILDES_RE = re.compile(r"^~~~[^\n]*\n[\s\S]*?^~~~[ \t]*\n?", re.MULTILINE)


def sanitize_content(content: str, rules: SanitizationRules | None) -> str:
    if rules is None:
        return content

    result = content
    if rules.remove_fenced_code_blocks:
        result = _FENCED_BACKTICKS_RE.sub("", result)
        result = _FENCED_TILDES_RE.sub("", result)
    return result


class ContentSanitizer(Transform):
    """Applies the folder's sanitization rules to the note body."""

    def apply(self, note: PublishableDocument) -> PublishableDocument:
        rules = note.folder.sanitization
        if rules is None:
            return note
        return note.model_copy(update={"content": sanitize_content(note.content, rules)})
