from config import Settings


def test_frontend_url_defaults_to_none(monkeypatch):
    monkeypatch.delenv("FRONTEND_URL", raising=False)
    assert Settings(_env_file=None).FRONTEND_URL is None


def test_frontend_url_from_environment(monkeypatch):
    monkeypatch.setenv("FRONTEND_URL", "https://shifts.example.org")
    assert Settings(_env_file=None).FRONTEND_URL == "https://shifts.example.org"


def test_database_url_from_environment():
    # conftest points the whole suite at an in-memory database
    assert Settings(_env_file=None).DATABASE_URL == "sqlite://"
