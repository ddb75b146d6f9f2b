"""Tests for the vaultpress CLI (publish, preview, ping, config)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from vaultpress.cli import app
from vaultpress.delivery import ConnectionStatus

runner = CliRunner()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("vaultpress.cli.configure_logging"):
        yield


@pytest.fixture()
def workdir(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return work


@pytest.fixture()
def vault_config(workdir):
    """A vault with two notes (one draft) and a config pointing at it."""
    vault = workdir / "vault"
    (vault / "Blog" / "Guides").mkdir(parents=True)
    (vault / "assets").mkdir()
    (vault / "Blog" / "First.md").write_text("---\npublish: true\n---\n![[logo.png]] Hi")
    (vault / "Blog" / "Guides" / "Draft.md").write_text("---\ndraft: true\n---\nWIP")
    (vault / "assets" / "logo.png").write_bytes(b"png")

    config = workdir / "site.yaml"
    config.write_text(
        f"vault_path: {vault}\n"
        "destinations:\n"
        "  - id: main\n"
        "    url: https://site.test\n"
        "    api_key: k\n"
        "folders:\n"
        "  - id: blog\n"
        "    vault_folder: Blog\n"
        "    route_base: /blog\n"
        "    destination_id: main\n"
    )
    return config


@pytest.fixture()
def note_sink():
    instance = MagicMock(name="HttpNoteUploader_instance")
    instance.deliver = AsyncMock(return_value=None)
    with patch("vaultpress.cli.HttpNoteUploader", return_value=instance):
        yield instance


@pytest.fixture()
def asset_uploader():
    instance = MagicMock(name="HttpAssetUploader_instance")
    instance.upload = AsyncMock(return_value=None)
    with patch("vaultpress.cli.HttpAssetUploader", return_value=instance):
        yield instance


# ---------------------------------------------------------------------------
# publish
# ---------------------------------------------------------------------------


class TestPublish:
    def test_dry_run_lists_routes(self, vault_config, note_sink):
        result = runner.invoke(app, ["--config", str(vault_config), "publish", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "/blog/first" in result.output
        assert "Draft" not in result.output
        note_sink.deliver.assert_not_awaited()

    def test_publishes_notes_and_assets(self, vault_config, note_sink, asset_uploader):
        result = runner.invoke(app, ["--config", str(vault_config), "publish"])
        assert result.exit_code == 0, result.output
        assert "Published" in result.output
        note_sink.deliver.assert_awaited_once()
        _, notes = note_sink.deliver.await_args.args
        assert [n.routing.full_path for n in notes] == ["/blog/first"]
        asset_uploader.upload.assert_awaited_once()
        assert asset_uploader.upload.await_args.args[1][0].vault_path == "assets/logo.png"

    def test_no_assets_flag(self, vault_config, note_sink, asset_uploader):
        result = runner.invoke(app, ["--config", str(vault_config), "publish", "--no-assets"])
        assert result.exit_code == 0
        asset_uploader.upload.assert_not_awaited()

    def test_delivery_failure_exits_1(self, vault_config, note_sink):
        note_sink.deliver.side_effect = RuntimeError("503")
        result = runner.invoke(app, ["--config", str(vault_config), "publish", "--no-assets"])
        assert result.exit_code == 1
        assert "Publication failed" in result.output

    def test_no_config(self, workdir):
        result = runner.invoke(app, ["publish"])
        assert result.exit_code == 1
        assert "No destinations" in result.output

    def test_unknown_destination(self, vault_config, note_sink):
        text = vault_config.read_text().replace("destination_id: main", "destination_id: other")
        vault_config.write_text(text)
        result = runner.invoke(app, ["--config", str(vault_config), "publish"])
        assert result.exit_code == 1
        assert "blog" in result.output
        note_sink.deliver.assert_not_awaited()

    def test_missing_vault(self, vault_config):
        text = vault_config.read_text().replace("/vault", "/no-such-vault")
        vault_config.write_text(text)
        result = runner.invoke(app, ["--config", str(vault_config), "publish"])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# preview
# ---------------------------------------------------------------------------


class TestPreview:
    def test_shows_routing_and_links(self, workdir):
        note = workdir / "My Post.md"
        note.write_text("---\ntitle: T\n---\n![[pic.png|right]] see [[Other Note]]")
        result = runner.invoke(app, ["preview", str(note), "--route-base", "/blog"])
        assert result.exit_code == 0, result.output
        assert "/blog/my-post" in result.output
        assert "pic.png" in result.output
        assert "Other Note" in result.output

    def test_excluded_note(self, workdir):
        note = workdir / "Hidden.md"
        note.write_text("---\npublish: false\n---\nbody")
        result = runner.invoke(app, ["preview", str(note)])
        assert result.exit_code == 0
        assert "excluded" in result.output

    def test_excluded_note_with_byte_order_mark(self, workdir):
        note = workdir / "Hidden.md"
        note.write_text("\ufeff---\npublish: false\n---\nbody", encoding="utf-8")
        result = runner.invoke(app, ["preview", str(note)])
        assert result.exit_code == 0
        assert "excluded" in result.output

    def test_missing_file(self, workdir):
        result = runner.invoke(app, ["preview", "nope.md"])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# ping
# ---------------------------------------------------------------------------


class TestPing:
    def test_all_destinations(self, vault_config):
        with patch(
            "vaultpress.cli.check_connection",
            new=AsyncMock(return_value=ConnectionStatus.success),
        ) as mock_check:
            result = runner.invoke(app, ["--config", str(vault_config), "ping"])
        assert result.exit_code == 0
        assert "success" in result.output
        assert mock_check.await_args.args[0].id == "main"

    def test_failure_exits_1(self, vault_config):
        with patch(
            "vaultpress.cli.check_connection",
            new=AsyncMock(return_value=ConnectionStatus.http_error),
        ):
            result = runner.invoke(app, ["--config", str(vault_config), "ping", "main"])
        assert result.exit_code == 1
        assert "http-error" in result.output

    def test_unknown_destination(self, vault_config):
        result = runner.invoke(app, ["--config", str(vault_config), "ping", "ghost"])
        assert result.exit_code == 1
        assert "ghost" in result.output


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_init_creates_file(self, workdir):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert (workdir / "vaultpress.yaml").exists()

    def test_init_refuses_overwrite(self, workdir):
        (workdir / "vaultpress.yaml").write_text("log_level: info\n")
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_init_force(self, workdir):
        (workdir / "vaultpress.yaml").write_text("log_level: info\n")
        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert "destinations" in (workdir / "vaultpress.yaml").read_text()

    def test_show(self, vault_config):
        result = runner.invoke(app, ["--config", str(vault_config), "config", "show"])
        assert result.exit_code == 0
        assert "vault_path" in result.output

    def test_show_hides_api_key(self, vault_config):
        vault_config.write_text(vault_config.read_text().replace("api_key: k", "api_key: TOPSECRET"))
        result = runner.invoke(app, ["--config", str(vault_config), "config", "show"])
        assert result.exit_code == 0
        assert "api_key" in result.output
        assert "TOPSECRET" not in result.output

    def test_invalid_config_file(self, workdir):
        bad = workdir / "bad.yaml"
        bad.write_text("log_level: loud\n")
        result = runner.invoke(app, ["--config", str(bad), "config", "show"])
        assert result.exit_code == 1
        assert "Invalid config" in result.output
