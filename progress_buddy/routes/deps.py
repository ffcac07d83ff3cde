from __future__ import annotations

from fastapi import HTTPException, Request

from ..db import Store
from ..errors import NotFoundError, QueryError, ValidationError
from ..logs import LogContext


def get_store(request: Request) -> Store:
    return request.app.state.store


def to_http_error(exc: Exception, log: LogContext | None = None) -> HTTPException:
    """Map a store failure onto an HTTP status and record it on the operation log."""
    if isinstance(exc, NotFoundError):
        status, detail = 404, str(exc)
    elif isinstance(exc, (ValidationError, QueryError)):
        status, detail = 400, str(exc)
    else:
        status, detail = 500, "internal error"
    if log is not None:
        log.write("ERROR", str(exc))
    return HTTPException(status_code=status, detail=detail)
