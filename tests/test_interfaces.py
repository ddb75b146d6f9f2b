"""Tests for collaborator protocols, logging setup and the rich progress sink."""

from __future__ import annotations

import io
import json
import logging

from rich.console import Console

from vaultpress.delivery import HttpAssetUploader, HttpNoteUploader, RecordingSink
from vaultpress.interfaces import (
    AssetsVault,
    AssetUploader,
    DeliverySink,
    DocumentSource,
    IdGenerator,
    ProgressSink,
)
from vaultpress.logging_setup import JsonFormatter, configure_logging, resolve_level
from vaultpress.progress import RichProgress
from vaultpress.publish.orchestrator import _new_note_id
from vaultpress.vault import FilesystemVault


# ---------------------------------------------------------------------------
# Structural subtyping
# ---------------------------------------------------------------------------


class TestProtocols:
    def test_filesystem_vault(self, tmp_path):
        vault = FilesystemVault(tmp_path)
        assert isinstance(vault, DocumentSource)
        assert isinstance(vault, AssetsVault)

    def test_sinks(self):
        assert isinstance(HttpNoteUploader(), DeliverySink)
        assert isinstance(RecordingSink(), DeliverySink)
        assert isinstance(HttpAssetUploader(), AssetUploader)

    def test_progress(self):
        assert isinstance(RichProgress(), ProgressSink)

    def test_id_generator(self):
        assert isinstance(_new_note_id, IdGenerator)

    def test_unrelated_object(self):
        assert not isinstance(object(), DeliverySink)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestLogging:
    def setup_method(self):
        self._handlers = logging.getLogger().handlers[:]
        self._level = logging.getLogger().level

    def teardown_method(self):
        root = logging.getLogger()
        root.handlers[:] = self._handlers
        root.setLevel(self._level)

    def test_levels(self):
        assert resolve_level("warn") == logging.WARNING
        assert resolve_level("DEBUG") == logging.DEBUG
        assert resolve_level("unknown") == logging.INFO

    def test_json_handler(self):
        configure_logging("error", "json")
        root = logging.getLogger()
        assert root.level == logging.ERROR
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_text_handler_replaces_previous(self):
        configure_logging("info", "json")
        configure_logging("debug", "text")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_json_format(self):
        record = logging.LogRecord("vaultpress.x", logging.INFO, __file__, 1, "sent %d", (3,), None)
        entry = json.loads(JsonFormatter().format(record))
        assert entry["message"] == "sent 3"
        assert entry["level"] == "info"
        assert entry["logger"] == "vaultpress.x"


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


class TestRichProgress:
    def _progress(self):
        return RichProgress("Testing", console=Console(file=io.StringIO()))

    def test_finish_without_start(self):
        self._progress().finish()

    def test_lifecycle(self):
        progress = self._progress()
        progress.start(3)
        progress.advance()
        progress.advance(2)
        task = progress._progress.tasks[0]
        assert task.completed == 3
        assert task.total == 3
        progress.finish()
        progress.finish()
