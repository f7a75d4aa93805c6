from __future__ import annotations

import uuid
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from buildstamp.common.compat import is_snapshot_compatible
from buildstamp.common.version import get_build_info, get_snapshot_hash

app = FastAPI()


class SnapshotCheck(BaseModel):
    compatible: bool
    snapshot_hash: str
    found: str


def _err(
    code: str,
    message: str,
    *,
    hint: str | None = None,
    details: Any | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {"code": code, "message": message}
    if hint:
        err["hint"] = hint
    if details is not None:
        err["details"] = details
    return err


def _error_response(request: Request, status_code: int, err: dict[str, Any]) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    payload: dict[str, Any] = {"ok": False, "error": err}
    if request_id:
        payload["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=payload)


@app.middleware("http")
async def _request_id_middleware(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = rid
    resp = await call_next(request)
    resp.headers["X-Request-ID"] = rid
    return resp


@app.exception_handler(HTTPException)
async def _http_exception_handler(request: Request, exc: HTTPException):
    if isinstance(exc.detail, dict) and "code" in exc.detail and "message" in exc.detail:
        err = exc.detail
    else:
        err = _err("HTTP_ERROR", str(exc.detail))
    return _error_response(request, exc.status_code, err)


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    err = _err("VALIDATION_ERROR", "Invalid request.", details=exc.errors())
    return _error_response(request, 422, err)


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    # 내부 예외 메시지를 그대로 노출하지 않음(세부는 type만 제공)
    err = _err("INTERNAL_ERROR", "Unexpected server error.", details={"type": type(exc).__name__})
    return _error_response(request, 500, err)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
def version() -> dict[str, Any]:
    """서버 식별용 빌드 정보(stamped identity + 런타임)."""
    return {
        "service": "buildstamp-api",
        **get_build_info(),
    }


@app.get("/version/snapshot", response_model=SnapshotCheck)
def snapshot_check(
    hash_: str = Query(
        ..., alias="hash", min_length=1, description="snapshot hash of the serialized artifact"
    ),
) -> SnapshotCheck:
    # 직렬화 산출물을 만든 쪽(producer)의 hash와 이 서버(consumer)의 hash 비교
    if not is_snapshot_compatible(hash_):
        raise HTTPException(
            status_code=409,
            detail=_err(
                "SNAPSHOT_MISMATCH",
                "Snapshot hash is not compatible with this build.",
                hint="Regenerate the snapshot with a build that has the same snapshot hash.",
                details={"expected": get_snapshot_hash(), "found": hash_},
            ),
        )
    return SnapshotCheck(compatible=True, snapshot_hash=get_snapshot_hash(), found=hash_)
