"""Test configuration building and validation"""

from dataclasses import FrozenInstanceError

import pytest

from restore_saved_albums.core.config import (
    DEFAULT_REDIRECT_URI,
    DEFAULT_SCOPE,
    MissingIdPolicy,
    SyncConfig,
    build_config,
)
from restore_saved_albums.core.exceptions import ConfigError


class TestSyncConfig:
    """Test SyncConfig defaults and validation"""

    def test_defaults(self):
        """Defaults are the known-good batch sizes"""
        config = SyncConfig()

        assert config.page_size == 50
        assert config.backup_batch_size == 50
        assert config.album_delete_batch_size == 20
        assert config.album_add_batch_size == 1
        assert config.spillover_delete_batch_size == 50
        assert config.backup_name_prefix == "srsa backup"
        assert config.missing_id_policy is MissingIdPolicy.IGNORE

    @pytest.mark.parametrize("field,value", [
        ("page_size", 0),
        ("page_size", 51),
        ("backup_batch_size", 101),
        ("album_delete_batch_size", -1),
        ("album_add_batch_size", 51),
        ("spillover_delete_batch_size", 1.5),
        ("page_size", True),
    ])
    def test_invalid_sizes(self, field, value):
        """Sizes must be integers within the upstream limit"""
        with pytest.raises(ConfigError) as exc_info:
            SyncConfig(**{field: value})

        assert exc_info.value.details["field"] == field

    def test_playlist_batch_may_exceed_library_limit(self):
        """Playlist appends allow up to 100 ids"""
        assert SyncConfig(backup_batch_size=100).backup_batch_size == 100

    def test_blank_prefix(self):
        """The backup name needs a prefix"""
        with pytest.raises(ConfigError):
            SyncConfig(backup_name_prefix="  ")

    def test_policy_from_string(self):
        """Policies can be given by value"""
        assert SyncConfig(missing_id_policy="warn").missing_id_policy is MissingIdPolicy.WARN

    def test_unknown_policy(self):
        """Unknown policies are rejected"""
        with pytest.raises(ConfigError, match="missing id policy"):
            SyncConfig(missing_id_policy="explode")

    def test_frozen(self):
        """Config cannot change after validation"""
        config = SyncConfig()

        with pytest.raises(FrozenInstanceError):
            config.page_size = 10


class TestBuildConfig:
    """Test build_config"""

    def test_builds_config(self):
        """Credentials are stripped, OAuth defaults applied"""
        config = build_config("  client  ", " secret\n")

        assert config.spotify.client_id == "client"
        assert config.spotify.client_secret == "secret"
        assert config.spotify.redirect_uri == DEFAULT_REDIRECT_URI
        assert config.spotify.scope == DEFAULT_SCOPE
        assert config.sync == SyncConfig()

    def test_scope_covers_library_and_playlist(self):
        """The scopes allow every call the run makes"""
        scopes = DEFAULT_SCOPE.split()

        assert "user-library-read" in scopes
        assert "user-library-modify" in scopes
        assert "playlist-modify-private" in scopes

    @pytest.mark.parametrize("client_id,client_secret", [
        ("", "secret"),
        ("client", "   "),
        (None, "secret"),
        ("client", None),
    ])
    def test_missing_credentials(self, client_id, client_secret):
        """Both credentials are required"""
        with pytest.raises(ConfigError):
            build_config(client_id, client_secret)

    def test_overrides(self):
        """Sync values can be overridden"""
        config = build_config("client", "secret", page_size=20, album_delete_batch_size=10)

        assert config.sync.page_size == 20
        assert config.sync.album_delete_batch_size == 10

    def test_unknown_override(self):
        """Unknown override names are rejected"""
        with pytest.raises(ConfigError) as exc_info:
            build_config("client", "secret", batch=5)

        assert exc_info.value.details["fields"] == ["batch"]
