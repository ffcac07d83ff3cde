import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture()
def db_path(tmp_path):
    return str(tmp_path / "data" / "buddy_test.db")


@pytest.fixture()
def store(db_path):
    from progress_buddy.db import Store
    s = Store(db_path).init()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def activity_fields():
    return {
        "name": "Run 5k",
        "specific": "Run",
        "measurable": "5km",
        "timebound": "30 days",
    }


@pytest.fixture()
def settings(db_path):
    return {
        "db_path": db_path,
        "port": 3001,
        "log_level": "INFO",
        "env": "test",
        "cors_origins": ["http://localhost:3000"],
    }


@pytest.fixture()
def client(db_path, settings):
    from fastapi.testclient import TestClient
    from progress_buddy.api import create_app
    from progress_buddy.db import Store

    app = create_app(store=Store(db_path), settings=settings)
    # context manager runs startup/shutdown, i.e. Store.init()/close()
    with TestClient(app) as c:
        yield c
