import pytest

from role_dm_bot.config.settings import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("DISCORD_TOKEN", "PORT", "HOST", "LOG_LEVEL", "DISCORD_GUILD_ID", "DISCORD_SYNC_GUILD_ONLY"):
        monkeypatch.delenv(var, raising=False)


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.port == 3000
    assert s.host == "0.0.0.0"
    assert s.log_level == "INFO"
    assert s.discord_guild_id is None
    assert s.discord_sync_guild_only is False


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISCORD_TOKEN", "  abc  ")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DISCORD_GUILD_ID", "")

    s = Settings(_env_file=None)
    assert s.discord_token == "abc"
    assert s.port == 8080
    assert s.log_level == "DEBUG"
    assert s.discord_guild_id is None
    s.validate_runtime()


def test_missing_token_is_fatal() -> None:
    with pytest.raises(RuntimeError, match="DISCORD_TOKEN"):
        Settings(_env_file=None).validate_runtime()


def test_bad_log_level_rejected() -> None:
    with pytest.raises(RuntimeError, match="LOG_LEVEL"):
        Settings(_env_file=None, discord_token="t", log_level="chatty").validate_runtime()


def test_port_range_checked() -> None:
    with pytest.raises(RuntimeError, match="PORT"):
        Settings(_env_file=None, discord_token="t", port=70000).validate_runtime()


def test_guild_only_sync_requires_guild(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISCORD_SYNC_GUILD_ONLY", "true")
    with pytest.raises(RuntimeError, match="DISCORD_GUILD_ID"):
        Settings(_env_file=None, discord_token="t").validate_runtime()

    monkeypatch.setenv("DISCORD_GUILD_ID", "1234")
    Settings(_env_file=None, discord_token="t").validate_runtime()
