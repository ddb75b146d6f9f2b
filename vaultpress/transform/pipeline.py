"""TransformPipeline: runs ordered note stages on an accepted document."""

from abc import ABC, abstractmethod

from vaultpress.models import PublishableDocument


class Transform(ABC):
    @abstractmethod
    def apply(self, note: PublishableDocument) -> PublishableDocument:
        """Return an enriched copy of ``note``. Must not mutate the input."""
        ...


class TransformPipeline:
    def __init__(self, transforms: list[Transform]):
        self.transforms = transforms

    def apply(self, note: PublishableDocument) -> PublishableDocument:
        for t in self.transforms:
            note = t.apply(note)
        return note


def default_pipeline() -> TransformPipeline:
    """Stages in publication order.

    Sanitization runs after inline rendering and before detection: rendered
    values can introduce fences, and detectors must see the final text.
    """
    from .assets import AssetDetector
    from .inline import InlineExpressionRenderer
    from .routing import RoutingComputer
    from .sanitizer import ContentSanitizer
    from .wikilinks import WikilinkDetector

    return TransformPipeline([
        InlineExpressionRenderer(),
        ContentSanitizer(),
        AssetDetector(),
        WikilinkDetector(),
        RoutingComputer(),
    ])
