from app.core.config import Settings


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("SLOW_REQUEST_THRESHOLD_MS", "250")
    monkeypatch.setenv("QUIET_PATHS", '["/health", "/ready"]')
    settings = Settings()
    assert settings.SLOW_REQUEST_THRESHOLD_MS == 250
    assert settings.QUIET_PATHS == ["/health", "/ready"]
    assert Settings.model_config["env_file"] == ".env"


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("SLOW_REQUEST_THRESHOLD_MS", raising=False)
    monkeypatch.delenv("QUIET_PATHS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.API_PREFIX == "/api"
    assert settings.QUIET_PATHS == ["/health"]
    assert settings.SLOW_REQUEST_THRESHOLD_MS == 1000
