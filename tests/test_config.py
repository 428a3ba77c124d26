from __future__ import annotations

from ronaldo_eats.config import Configuration


def test_defaults(monkeypatch) -> None:
    for name in (
        "RONALDO_EATS_STORAGE_PATH",
        "RONALDO_EATS_KEY_PREFIX",
        "RONALDO_EATS_CATALOG_PATH",
        "RONALDO_EATS_FEED_COUNT",
        "RONALDO_EATS_EXCLUDE_RATED",
        "RONALDO_EATS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    cfg = Configuration.from_env()
    assert cfg.storage_path is None
    assert cfg.persistent is False
    assert cfg.key_prefix == "@ronaldo_eats"
    assert cfg.feed_count == 10
    assert cfg.exclude_rated is False
    assert "storage=memory" in cfg.log_summary()


def test_env_and_overrides(monkeypatch) -> None:
    monkeypatch.setenv("RONALDO_EATS_STORAGE_PATH", "/tmp/eats.json")
    monkeypatch.setenv("RONALDO_EATS_FEED_COUNT", "5")
    monkeypatch.setenv("RONALDO_EATS_EXCLUDE_RATED", "yes")

    cfg = Configuration.from_env({"feed_count": 7, "key_prefix": None})
    assert cfg.persistent is True
    assert cfg.feed_count == 7
    assert cfg.exclude_rated is True
    assert cfg.key_prefix == "@ronaldo_eats"
