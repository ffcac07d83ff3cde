from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..db import Store
from ..logs import LogContext
from .deps import get_store, to_http_error

router = APIRouter()


class LogCreate(BaseModel):
    activity_id: int
    text: str
    metrics: Optional[Any] = None  # free text or a JSON object


@router.get("/api/logs/activity/{activity_id}")
def api_logs_by_activity(activity_id: int, store: Store = Depends(get_store)):
    return store.list_logs_by_activity(activity_id)


@router.post("/api/logs", status_code=201)
def api_log_create(body: LogCreate, store: Store = Depends(get_store)):
    log = LogContext("CREATE_LOG")
    log.set_payload(body.dict())
    try:
        log_id = store.create_log(body.dict())
        log.set_entity("LOG", log_id)
        log.write("OK")
        return {"id": log_id, "message": "ok"}
    except Exception as e:
        raise to_http_error(e, log)
