from __future__ import annotations

import json
import logging

from progress_buddy import config
from progress_buddy.logs import LogContext, OPLOG_LOGGER


def _clear_env(monkeypatch):
    for k in ("BUDDY_DB_PATH", "DATABASE_URL", "BUDDY_CONFIG", "PORT", "BUDDY_LOG_LEVEL", "APP_ENV"):
        monkeypatch.delenv(k, raising=False)


def test_db_path_precedence(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("BUDDY_CONFIG", str(tmp_path / "missing.yaml"))
    assert config.get_db_path().endswith("progress_buddy.db")

    cfg = tmp_path / "config.yaml"
    cfg.write_text("db_path: /srv/buddy/from_yaml.db\n", encoding="utf-8")
    monkeypatch.setenv("BUDDY_CONFIG", str(cfg))
    assert config.get_db_path() == "/srv/buddy/from_yaml.db"

    monkeypatch.setenv("DATABASE_URL", "sqlite:////var/lib/buddy.db")
    assert config.get_db_path() == "/var/lib/buddy.db"

    monkeypatch.setenv("BUDDY_DB_PATH", "/tmp/env.db")
    assert config.get_db_path() == "/tmp/env.db"

    assert config.get_db_path("/explicit.db") == "/explicit.db"


def test_load_settings_defaults_and_overrides(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("BUDDY_CONFIG", str(tmp_path / "missing.yaml"))
    s = config.load_settings()
    assert s["port"] == 3001
    assert s["log_level"] == "INFO"
    assert s["cors_origins"] == ["http://localhost:3000"]

    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "port: 8080\nlog_level: debug\ncors_origins:\n  - https://example.app\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("BUDDY_CONFIG", str(cfg))
    monkeypatch.setenv("PORT", "9000")
    s = config.load_settings()
    assert s["port"] == 9000
    assert s["log_level"] == "DEBUG"
    assert s["cors_origins"] == ["https://example.app"]


def test_malformed_yaml_falls_back(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    cfg = tmp_path / "config.yaml"
    cfg.write_text("port: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("BUDDY_CONFIG", str(cfg))
    assert config.load_settings()["port"] == 3001


def test_log_context_emits_json_record(caplog):
    caplog.set_level(logging.INFO, logger=OPLOG_LOGGER)
    log = LogContext("CREATE_ACTIVITY")
    log.set_entity("ACTIVITY", 7)
    log.set_payload({"name": "Run 5k"})
    rec = log.write("ERROR", "name is required")

    assert rec["entity_id"] == "7"
    assert rec["result"] == "ERROR"
    emitted = [r for r in caplog.records if r.name == OPLOG_LOGGER]
    assert len(emitted) == 1
    assert emitted[0].levelno == logging.WARNING
    assert json.loads(emitted[0].getMessage())["action"] == "CREATE_ACTIVITY"
