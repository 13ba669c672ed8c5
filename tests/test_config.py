from social_preview.config import Settings


def test_defaults_match_fetch_and_rate_limit_bounds(monkeypatch):
    for name in ("FETCH_TIMEOUT_SECONDS", "FETCH_MAX_BYTES", "RATE_LIMIT_MAX_REQUESTS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.fetch_timeout_seconds == 10.0
    assert settings.fetch_max_bytes == 2 * 1024 * 1024
    assert settings.rate_limit_max_requests == 30
    assert settings.rate_limit_window_seconds == 60.0


def test_only_service_settings_are_declared():
    assert "app_env" not in Settings.model_fields
    assert not hasattr(Settings, "is_development")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FETCH_MAX_BYTES", "1024")
    monkeypatch.setenv("trust_forwarded_for", "true")

    settings = Settings(_env_file=None)

    assert settings.fetch_max_bytes == 1024
    assert settings.trust_forwarded_for is True
