"""PublicationOrchestrator: collects notes, runs the note pipeline, delivers per destination."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence

from vaultpress.config.models import DestinationConfig, FolderConfig, IgnoreRule, VaultpressConfig
from vaultpress.interfaces import DeliverySink, DocumentSource, ProgressSink
from vaultpress.models import PublishableDocument, RawDocument
from vaultpress.transform import (
    TransformPipeline,
    default_pipeline,
    evaluate_ignore_rules,
    normalize_frontmatter,
)

from .models import (
    CollectionError,
    DeliveryError,
    PipelineError,
    PublicationResult,
    PublicationStatus,
)

logger = logging.getLogger(__name__)


def _new_note_id() -> str:
    return uuid.uuid4().hex


def _title_from_path(path: str) -> str:
    """'Blog/My Note.md' -> 'My Note'"""
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    stem, dot, _ext = name.rpartition(".")
    return stem if dot else name


def prepare_document(
    raw: RawDocument,
    destination: DestinationConfig,
    rules: Sequence[IgnoreRule] | None,
    *,
    note_id: str,
    pipeline: TransformPipeline | None = None,
) -> PublishableDocument | None:
    """Run the per-note stages. Returns None when an ignore rule rejects the note."""
    if raw.folder is None:
        raise ValueError(f"document {raw.source_path!r} has no folder config")

    frontmatter = normalize_frontmatter(raw.frontmatter)
    eligibility = evaluate_ignore_rules(frontmatter, rules)
    if not eligibility.is_publishable:
        rule = eligibility.ignored_by_rule
        logger.debug(
            "ignored %s (rule %d: %s=%r)",
            raw.source_path, rule.rule_index, rule.property, rule.matched_value,
        )
        return None

    note = PublishableDocument(
        note_id=note_id,
        title=_title_from_path(raw.source_path),
        source_path=raw.source_path,
        relative_path=raw.relative_path,
        content=raw.content,
        frontmatter=frontmatter,
        folder=raw.folder,
        destination=destination,
    )
    return (pipeline or default_pipeline()).apply(note)


class PublicationOrchestrator:
    """Sequences the note pipeline over every configured folder.

    Validation is all-or-nothing: if any folder points at an unknown
    destination, nothing is collected or delivered. Delivery is sequential
    per destination and stops at the first failure.
    """

    def __init__(
        self,
        source: DocumentSource,
        sink: DeliverySink,
        *,
        id_generator: Callable[[], str] | None = None,
        pipeline: TransformPipeline | None = None,
    ) -> None:
        self.source = source
        self.sink = sink
        self.id_generator = id_generator or _new_note_id
        self.pipeline = pipeline or default_pipeline()

    async def execute(
        self, config: VaultpressConfig, progress: ProgressSink | None = None
    ) -> PublicationResult:
        try:
            return await self._run(config, progress)
        finally:
            if progress is not None:
                progress.finish()

    async def _run(
        self, config: VaultpressConfig, progress: ProgressSink | None
    ) -> PublicationResult:
        logger.info("starting publication")

        if not config.destinations or not config.folders:
            logger.warning("no destinations or folders configured")
            return PublicationResult(status=PublicationStatus.no_config)

        bindings, missing = _bind_destinations(config.folders, config.destinations)
        if missing:
            logger.error("folders without destination: %s", ", ".join(missing))
            return PublicationResult(
                status=PublicationStatus.missing_destination,
                folders_without_destination=missing,
            )

        # 1. Collect raw notes, folder by folder
        collected: list[tuple[RawDocument, DestinationConfig]] = []
        for folder, destination in bindings:
            logger.debug("collecting folder %s", folder.id)
            try:
                docs = await self.source.collect(folder)
            except CollectionError as exc:
                logger.error("%s", exc)
                return PublicationResult(status=PublicationStatus.error, error=exc)
            except Exception as exc:
                err = CollectionError(folder.id, exc)
                logger.error("%s", err)
                return PublicationResult(status=PublicationStatus.error, error=err)

            for doc in docs:
                collected.append((doc.model_copy(update={"folder": folder}), destination))

        if progress is not None:
            progress.start(len(collected))
        logger.info("collected %d note(s)", len(collected))

        # 2. Per-note pipeline
        publishable: list[PublishableDocument] = []
        for raw, destination in collected:
            try:
                note = prepare_document(
                    raw,
                    destination,
                    config.ignore_rules,
                    note_id=self.id_generator(),
                    pipeline=self.pipeline,
                )
            except Exception as exc:
                err = PipelineError(raw.source_path, exc)
                logger.error("%s", err)
                return PublicationResult(status=PublicationStatus.error, error=err)
            if note is not None:
                route = note.routing.full_path if note.routing else "-"
                logger.debug("ready: %s -> %s", note.source_path, route)
                publishable.append(note)
            if progress is not None:
                progress.advance(1)

        if not publishable:
            logger.info("no publishable notes after filtering")
            return PublicationResult(status=PublicationStatus.success)

        # 3. Group by destination, first-seen order
        buckets: dict[str, list[PublishableDocument]] = {}
        for note in publishable:
            buckets.setdefault(note.destination.id, []).append(note)

        # 4. Deliver each bucket; abort on the first failure
        published = 0
        for destination_id, notes in buckets.items():
            destination = notes[0].destination
            logger.info("delivering %d note(s) to %s", len(notes), destination_id)
            try:
                await self.sink.deliver(destination, notes)
            except Exception as exc:
                err = exc if isinstance(exc, DeliveryError) else DeliveryError(destination_id, cause=exc)
                logger.error("%s", err)
                return PublicationResult(
                    status=PublicationStatus.error,
                    published_count=published,
                    error=err,
                )
            published += len(notes)

        logger.info("published %d note(s)", published)
        return PublicationResult(
            status=PublicationStatus.success,
            published_count=published,
            notes=publishable,
        )


def _bind_destinations(
    folders: Sequence[FolderConfig], destinations: Sequence[DestinationConfig]
) -> tuple[list[tuple[FolderConfig, DestinationConfig]], list[str]]:
    by_id = {d.id: d for d in destinations}
    bindings: list[tuple[FolderConfig, DestinationConfig]] = []
    missing: list[str] = []
    for folder in folders:
        destination = by_id.get(folder.destination_id)
        if destination is None:
            logger.warning(
                "folder %s references unknown destination %s", folder.id, folder.destination_id
            )
            missing.append(folder.id)
            continue
        bindings.append((folder, destination))
    return bindings, missing
