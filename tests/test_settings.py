from core import settings


def test_allowed_origins_default_to_wildcard(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    assert settings.allowed_origins() == ["*"]


def test_allowed_origins_split_on_commas(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://explorateur.cm, http://localhost:5173,,")
    assert settings.allowed_origins() == ["https://explorateur.cm", "http://localhost:5173"]


def test_env_int_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "lots")
    assert settings.rate_limit_max_requests() == 100


def test_rate_limit_window_defaults_to_fifteen_minutes(monkeypatch):
    monkeypatch.delenv("RATE_LIMIT_WINDOW_SECONDS", raising=False)
    assert settings.rate_limit_window_seconds() == 900


def test_env_bool(monkeypatch):
    monkeypatch.setenv("TRUST_PROXY", "no")
    assert settings.trust_proxy() is False
    monkeypatch.setenv("TRUST_PROXY", "1")
    assert settings.trust_proxy() is True


def test_app_env_flags(monkeypatch):
    monkeypatch.setenv("APP_ENV", "Production")
    assert settings.is_production() is True
    assert settings.is_development() is False


def test_forwarded_for_is_not_trusted_by_default(monkeypatch):
    monkeypatch.delenv("TRUST_PROXY", raising=False)
    assert settings.trust_proxy() is False
