"""Note transformation stages, from raw frontmatter to a routed document."""

from .pipeline import Transform, TransformPipeline, default_pipeline
from .frontmatter import MISSING, normalize_frontmatter, resolve_path
from .eligibility import evaluate_ignore_rules
from .inline import InlineExpressionRenderer, render_inline_expressions
from .sanitizer import ContentSanitizer, sanitize_content
from .assets import AssetDetector, detect_assets
from .wikilinks import WikilinkDetector, detect_wikilinks
from .routing import RoutingComputer, compute_routing, slugify_segment

__all__ = [
    "MISSING",
    "AssetDetector",
    "ContentSanitizer",
    "InlineExpressionRenderer",
    "RoutingComputer",
    "Transform",
    "TransformPipeline",
    "WikilinkDetector",
    "compute_routing",
    "default_pipeline",
    "detect_assets",
    "detect_wikilinks",
    "evaluate_ignore_rules",
    "normalize_frontmatter",
    "render_inline_expressions",
    "resolve_path",
    "sanitize_content",
    "slugify_segment",
]
