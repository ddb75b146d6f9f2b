"""Tests for AssetPublisher with mocked vault and uploader."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from vaultpress.models import ResolvedAsset
from vaultpress.publish import AssetPublisher, AssetsPublicationStatus
from vaultpress.transform import default_pipeline


def _resolved(target):
    return ResolvedAsset(vault_path=f"assets/{target}", file_name=target, relative_asset_path=target)


@pytest.fixture
def vault():
    v = MagicMock()
    v.resolve = AsyncMock(side_effect=lambda asset, folder, fallback: _resolved(asset.target))
    return v


@pytest.fixture
def uploader():
    u = MagicMock()
    u.upload = AsyncMock(return_value=None)
    return u


@pytest.fixture
def notes(make_note):
    first = make_note(content="![[a.png]] ![[b.pdf]]").model_copy(update={"note_id": "n1"})
    second = make_note(content="![[A.PNG]] ![[c.mp3]]").model_copy(update={"note_id": "n2"})
    return [default_pipeline().apply(first), default_pipeline().apply(second)]


class TestAssetPublisher:
    @pytest.mark.asyncio
    async def test_uploads_unique_assets(self, vault, uploader, destination, notes):
        result = await AssetPublisher(vault, uploader).execute(
            destination, notes, assets_folder="assets", vault_fallback=True,
        )
        assert result.status is AssetsPublicationStatus.success
        assert result.published_assets_count == 3
        assert result.failures == []
        uploaded = [c.args[1][0].file_name for c in uploader.upload.await_args_list]
        assert uploaded == ["a.png", "b.pdf", "c.mp3"]
        vault.resolve.assert_any_await(notes[0].assets[0], "assets", True)

    @pytest.mark.asyncio
    async def test_no_assets(self, vault, uploader, destination, make_note):
        result = await AssetPublisher(vault, uploader).execute(
            destination, [make_note(content="text only")], assets_folder="assets", vault_fallback=True,
        )
        assert result.status is AssetsPublicationStatus.no_assets
        uploader.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_found_and_resolve_error(self, uploader, destination, notes):
        def resolve(asset, folder, fallback):
            if asset.target == "b.pdf":
                return None
            if asset.target == "c.mp3":
                raise OSError("permission denied")
            return _resolved(asset.target)

        vault = MagicMock()
        vault.resolve = AsyncMock(side_effect=resolve)
        result = await AssetPublisher(vault, uploader).execute(
            destination, notes, assets_folder="assets", vault_fallback=False,
        )
        assert result.published_assets_count == 1
        reasons = {(f.note_id, f.asset.target, f.reason) for f in result.failures}
        assert reasons == {("n1", "b.pdf", "not-found"), ("n2", "c.mp3", "resolve-error")}

    @pytest.mark.asyncio
    async def test_upload_error_continues(self, vault, destination, notes):
        uploader = MagicMock()
        uploader.upload = AsyncMock(side_effect=[RuntimeError("413"), None, None])
        progress = MagicMock()
        result = await AssetPublisher(vault, uploader).execute(
            destination, notes, assets_folder="assets", vault_fallback=True, progress=progress,
        )
        assert result.published_assets_count == 2
        assert [f.reason for f in result.failures] == ["upload-error"]
        assert isinstance(result.failures[0].error, RuntimeError)
        progress.start.assert_called_once_with(3)
        assert progress.advance.call_count == 3
        progress.finish.assert_called_once()
