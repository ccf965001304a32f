from config import DEV_JWT_SECRET, Settings


def test_from_env_reads_overrides(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
    monkeypatch.setenv("JWT_SECRET", "from-env-secret-0123456789abcdef")
    monkeypatch.setenv("OVERPASS_TIMEOUT_S", "12")
    monkeypatch.setenv("CHAT_FUZZY_MATCH", "no")
    monkeypatch.setenv("FRONTEND_PROD", "https://trips.example.com")

    s = Settings.from_env()
    assert s.mongo_uri == "mongodb://db:27017"
    assert s.jwt_secret == "from-env-secret-0123456789abcdef"
    assert s.overpass_timeout_s == 12.0
    assert s.chat_fuzzy_match is False
    assert "https://trips.example.com" in s.cors_origins


def test_from_env_defaults(monkeypatch):
    for key in ("JWT_SECRET", "SEARCH_RADIUS_M", "CHAT_FUZZY_MATCH", "FRONTEND_PROD"):
        monkeypatch.delenv(key, raising=False)
    s = Settings.from_env()
    assert s.jwt_secret == DEV_JWT_SECRET
    assert s.search_radius_m == 25000
    assert s.chat_fuzzy_match is True
    assert s.cors_origins == ["http://localhost:3000", "http://localhost:5173"]
