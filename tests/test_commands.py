"""Tests for the config and sync commands."""

from unittest.mock import MagicMock

import pytest

from playsync.commands import Command, ConfigCommand, SyncCommand
from playsync.errors import (
    AuthError,
    DuplicateTargetError,
    PlaylistNotFoundError,
    RuleNotFoundError,
    SyncAborted,
    ValidationError,
)
from playsync.models import Configuration

from .conftest import FakePlaylistClient


@pytest.fixture
def client():
    return FakePlaylistClient(
        {"PLtarget": ["A"], "PLsrc": ["A", "B"], "PLother": ["C"]},
        titles={"PLtarget": "Target", "PLsrc": "Source", "PLother": "Other"},
    )


@pytest.fixture
def factory(client):
    return MagicMock(return_value=client)


@pytest.fixture
def configured(store):
    """Store with a credentials path and one rule."""
    configuration = Configuration(oauth2_json="/tmp/client.json")
    configuration.add_rule("PLsrc", [], title="Source")
    configuration.add_rule("PLtarget", ["PLsrc"], title="Target")
    store.save(configuration)
    return store


def test_base_command_run_validates(store):
    """Test run validates before running."""
    cmd = Command(store)

    assert not cmd.run()
    assert cmd._validated


def test_base_command_requires_oauth_path(store, factory):
    """Test get_client refuses to authenticate without a credentials path."""
    cmd = Command(store, factory)

    with pytest.raises(AuthError, match="not set"):
        cmd.get_client(Configuration())
    factory.assert_not_called()


def test_base_command_caches_client(store, factory):
    """Test the client is built only once."""
    cmd = Command(store, factory)
    configuration = Configuration(oauth2_json="/tmp/client.json", quota_policy="retry")

    assert cmd.get_client(configuration) is cmd.get_client(configuration)
    factory.assert_called_once_with(configuration, "retry")


class TestConfigCommand:
    def test_set_oauth_path(self, store, tmp_path):
        secrets = tmp_path / "client.json"
        secrets.write_text("{}")

        assert ConfigCommand(store, oauth2_json=str(secrets)).run()

        assert store.load().oauth2_json == str(secrets)

    def test_add_fetches_title(self, configured, factory, client):
        cmd = ConfigCommand(configured, factory, add="PLother", sources=["PLsrc", "PLtarget"])

        assert cmd.run()

        rule = configured.load().get_rule("PLother")
        assert rule.title == "Other"
        assert rule.sync_from == ["PLsrc", "PLtarget"]

    def test_add_requires_oauth_path(self, store, factory):
        with pytest.raises(AuthError):
            ConfigCommand(store, factory, add="PLtarget").run()

        assert not store.exists()

    def test_add_oauth_path_and_playlist_together(self, store, factory, tmp_path):
        secrets = tmp_path / "client.json"
        secrets.write_text("{}")

        ConfigCommand(store, factory, oauth2_json=str(secrets), add="PLtarget").run()

        configuration = store.load()
        assert configuration.oauth2_json == str(secrets)
        assert configuration.get_rule("PLtarget").title == "Target"

    def test_add_duplicate_does_not_call_api(self, configured, factory):
        with pytest.raises(DuplicateTargetError):
            ConfigCommand(configured, factory, add="PLtarget").run()

        factory.assert_not_called()

    def test_add_unknown_playlist_saves_nothing(self, configured, factory, tmp_path):
        before = configured.load()

        with pytest.raises(PlaylistNotFoundError):
            ConfigCommand(
                configured, factory, oauth2_json=str(tmp_path / "new.json"), add="PLnope"
            ).run()

        assert configured.load() == before

    def test_remove(self, configured):
        assert ConfigCommand(configured, remove="PLtarget").run()

        assert configured.load().get_rule("PLtarget") is None

    def test_remove_unknown(self, configured):
        with pytest.raises(RuleNotFoundError):
            ConfigCommand(configured, remove="PLnope").run()

    def test_reset_confirmed(self, configured):
        confirm = MagicMock(return_value=True)

        assert ConfigCommand(configured, reset=True, confirm=confirm).run()

        confirm.assert_called_once()
        assert configured.load() == Configuration()

    def test_reset_declined(self, configured):
        before = configured.load()

        ConfigCommand(configured, reset=True, confirm=MagicMock(return_value=False)).run()

        assert configured.load() == before

    def test_reset_assume_yes(self, configured):
        confirm = MagicMock()

        ConfigCommand(configured, reset=True, assume_yes=True, confirm=confirm).run()

        confirm.assert_not_called()
        assert configured.load().playlists == []

    def test_set_quota_policy(self, configured):
        ConfigCommand(configured, quota_policy="retry").run()

        assert configured.load().quota_policy == "retry"

    def test_sources_require_add(self, store):
        with pytest.raises(ValidationError, match="--from"):
            ConfigCommand(store, sources=["PLsrc"]).run()

    def test_list(self, configured, caplog, monkeypatch):
        monkeypatch.setattr("playsync.logging_config.logger.propagate", True)
        configuration = configured.load()
        configuration.get_rule("PLtarget").sync_from.append("PLelsewhere")
        configured.save(configuration)

        with caplog.at_level("INFO", logger="playsync"):
            assert ConfigCommand(configured, list_playlists=True).run()

        assert "OAuth2 JSON path: /tmp/client.json" in caplog.messages
        assert "  Target (ID: PLtarget)" in caplog.messages
        assert "    <- Source (ID: PLsrc)" in caplog.messages
        assert "    <- PLelsewhere (untracked playlist)" in caplog.messages
        assert "    No sync sources" in caplog.messages

    def test_no_flags_lists(self, configured):
        cmd = ConfigCommand(configured)
        cmd.validate()

        assert cmd.list_playlists


class TestSyncCommand:
    def test_sync(self, configured, factory, client):
        cmd = SyncCommand(configured, factory)

        assert cmd.run()

        assert client.inserted == [("PLtarget", "B")]
        assert [report.summary() for report in cmd.reports] == ["1 added, 1 skipped (duplicate)"]

    def test_dry_run(self, configured, factory, client):
        cmd = SyncCommand(configured, factory, dry_run=True)

        assert cmd.run()

        assert client.inserted == []
        assert [video.video_id for video in cmd.reports[0].to_add] == ["B"]

    def test_requires_oauth_path(self, store, factory):
        with pytest.raises(AuthError):
            SyncCommand(store, factory).run()

        factory.assert_not_called()

    def test_unknown_playlist_id(self, configured, factory):
        with pytest.raises(ValidationError, match="PLnope"):
            SyncCommand(configured, factory, playlist_id="PLnope").run()

        factory.assert_not_called()

    def test_nothing_configured(self, store, factory):
        store.save(Configuration(oauth2_json="/tmp/client.json"))

        assert SyncCommand(store, factory).run()

        factory.assert_not_called()

    def test_quota_policy_override(self, configured, factory):
        SyncCommand(configured, factory, quota_policy="retry").run()

        assert factory.call_args.args[1] == "retry"

    def test_unknown_quota_policy(self, configured, factory):
        with pytest.raises(ValidationError):
            SyncCommand(configured, factory, quota_policy="never").run()

    def test_quota_abort_keeps_reports(self, configured, factory, client):
        client.quota_after = 0

        cmd = SyncCommand(configured, factory)
        with pytest.raises(SyncAborted):
            cmd.run()

        assert cmd.reports[0].aborted
