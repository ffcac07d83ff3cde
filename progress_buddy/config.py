from __future__ import annotations

# progress_buddy/config.py
import os

import yaml

# Database path resolution order:
# 1) explicit path passed to Store(...)
# 2) BUDDY_DB_PATH env
# 3) DATABASE_URL env (an optional sqlite:/// prefix is stripped)
# 4) config.yaml db_path
# 5) fallback: <project>/data/progress_buddy.db
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_DATA_DIR = os.path.join(_PROJECT_ROOT, "data")
_DEFAULT_DB = os.path.join(_DATA_DIR, "progress_buddy.db")

DEFAULTS = {
    "port": 3001,
    "log_level": "INFO",
    "env": "development",
    "cors_origins": ["http://localhost:3000"],
}


def _config_path() -> str:
    return os.environ.get("BUDDY_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")


def read_config_yaml(path: str | None = None) -> dict:
    cfg_path = path or _config_path()
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return cfg if isinstance(cfg, dict) else {}


def _strip_sqlite_url(url: str) -> str:
    for prefix in ("sqlite:///", "sqlite://"):
        if url.startswith(prefix):
            return url[len(prefix):]
    return url


def get_db_path(explicit: str | None = None, cfg: dict | None = None) -> str:
    if explicit:
        return explicit
    env_path = os.environ.get("BUDDY_DB_PATH")
    if env_path:
        return env_path
    url = os.environ.get("DATABASE_URL")
    if url:
        return _strip_sqlite_url(url)
    cfg = read_config_yaml() if cfg is None else cfg
    cfg_db = cfg.get("db_path")
    if isinstance(cfg_db, str) and cfg_db.strip():
        return cfg_db.strip()
    return _DEFAULT_DB


def load_settings(path: str | None = None) -> dict:
    """Merge config.yaml and environment over DEFAULTS."""
    cfg = read_config_yaml(path)

    origins = cfg.get("cors_origins")
    if not isinstance(origins, list) or not origins:
        origins = list(DEFAULTS["cors_origins"])

    port = os.environ.get("PORT") or cfg.get("port") or DEFAULTS["port"]
    try:
        port = int(port)
    except (TypeError, ValueError):
        port = DEFAULTS["port"]

    return {
        "db_path": get_db_path(cfg=cfg),
        "port": port,
        "log_level": str(os.environ.get("BUDDY_LOG_LEVEL") or cfg.get("log_level") or DEFAULTS["log_level"]).upper(),
        "env": os.environ.get("APP_ENV") or cfg.get("env") or DEFAULTS["env"],
        "cors_origins": [str(o) for o in origins],
    }
