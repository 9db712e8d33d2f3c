import importlib

from fintrack import config


def test_defaults():
    assert config.REPORT_MONTH == "2026-02"
    assert config.seed_path().endswith("seed.json")
    assert len(config.MEMBER_COLORS) == 6
    assert set(config.AVATARS) == {"parent", "child"}
    assert config.LIMIT_WARNING_PCT < config.LIMIT_EXCEEDED_PCT


def test_environment_overrides(monkeypatch, tmp_path):
    seed = tmp_path / "other.json"
    monkeypatch.setenv("FINTRACK_MONTH", "2026-03")
    monkeypatch.setenv("FINTRACK_SEED_PATH", str(seed))
    monkeypatch.setenv("FINTRACK_LOG_LEVEL", "debug")
    try:
        importlib.reload(config)
        assert config.REPORT_MONTH == "2026-03"
        assert config.seed_path() == str(seed)
        assert config.LOG_LEVEL == "DEBUG"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
