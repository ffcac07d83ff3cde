import datetime as dt

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..db import Store
from ..errors import StoreError
from .. import __version__
from .deps import get_store

router = APIRouter()

@router.get("/api/health")
def health():
    return {
        "status": "OK",
        "message": "Progress Buddy API is running",
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
    }

@router.get("/version")
def version():
    return {"app": "progress-buddy-api", "version": __version__}

@router.get("/api/test-db")
def test_db(store: Store = Depends(get_store)):
    try:
        return {"database": "connected", "test": store.ping()}
    except StoreError as e:
        return JSONResponse(status_code=500, content={"database": "error", "error": str(e)})
