"""In-memory delivery sink used for dry runs."""

from __future__ import annotations

import logging

from vaultpress.config.models import DestinationConfig
from vaultpress.models import PublishableDocument

logger = logging.getLogger(__name__)


class RecordingSink:
    """Keeps every delivered bucket instead of sending it anywhere."""

    def __init__(self) -> None:
        self.deliveries: list[tuple[DestinationConfig, list[PublishableDocument]]] = []

    async def deliver(
        self, destination: DestinationConfig, notes: list[PublishableDocument]
    ) -> None:
        logger.debug("dry run: %d note(s) for %s", len(notes), destination.id)
        self.deliveries.append((destination, list(notes)))
