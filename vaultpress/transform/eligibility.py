"""Decides whether a note is publishable from its frontmatter and ignore rules."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from vaultpress.config.models import IgnoreRule
from vaultpress.models import Eligibility, IgnoredByRule, NormalizedMetadata

from .frontmatter import MISSING, resolve_path

logger = logging.getLogger(__name__)

_NUMBER_TYPES = (int, float)


def strict_equals(value: Any, target: Any) -> bool:
    """Equality without coercion: ``1`` never matches ``True`` or ``"1"``."""
    if isinstance(value, bool) or isinstance(target, bool):
        return isinstance(value, bool) and isinstance(target, bool) and value == target
    if isinstance(value, _NUMBER_TYPES) and isinstance(target, _NUMBER_TYPES):
        return value == target
    if isinstance(value, str) and isinstance(target, str):
        return value == target
    return False


def _match_any(value: Any, targets: Sequence[Any]) -> Any:
    """Return the first listed target matching value (or any item of it)."""
    if isinstance(value, (list, tuple)):
        for item in value:
            for t in targets:
                if strict_equals(item, t):
                    return t
        return MISSING

    for t in targets:
        if strict_equals(value, t):
            return t
    return MISSING


def evaluate_ignore_rules(
    frontmatter: NormalizedMetadata,
    rules: Sequence[IgnoreRule] | None,
) -> Eligibility:
    if not rules:
        return Eligibility(is_publishable=True)

    for index, rule in enumerate(rules):
        value = resolve_path(frontmatter.nested, rule.property)
        if value is MISSING:
            continue

        if rule.ignore_if is not None and isinstance(value, bool) and value == rule.ignore_if:
            logger.debug("rule %d matched %s ignoreIf=%s", index, rule.property, rule.ignore_if)
            return Eligibility(
                is_publishable=False,
                ignored_by_rule=IgnoredByRule(
                    property=rule.property,
                    reason="ignoreIf",
                    matched_value=rule.ignore_if,
                    rule_index=index,
                ),
            )

        if rule.ignore_values:
            matched = _match_any(value, rule.ignore_values)
            if matched is not MISSING:
                logger.debug("rule %d matched %s value=%r", index, rule.property, matched)
                return Eligibility(
                    is_publishable=False,
                    ignored_by_rule=IgnoredByRule(
                        property=rule.property,
                        reason="ignoreValues",
                        matched_value=matched,
                        rule_index=index,
                    ),
                )

    return Eligibility(is_publishable=True)
