"""FastAPI wrapper for schemaops validation."""

from __future__ import annotations

import importlib.metadata
import json
import logging
import os
import threading
import time
import uuid
from pathlib import Path
from typing import Any, Literal

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.concurrency import run_in_threadpool

from apps.cli.report_human import ValidationOutcome
from core.keywords.defaults import build_default_library
from core.report.models import ProcessingReport
from core.validation.engine import ValidationEngine
from core.validation.policy import load_policy

app = FastAPI(title="schemaops API", version="0.1.0")
logger = logging.getLogger("schemaops.api")

_DEFAULT_MAX_BODY_BYTES = 5 * 1024 * 1024
_REQUEST_ID_HEADER = "X-Schemaops-Request-Id"


class SchemaRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schema_document: Any = Field(alias="schema")


class InstanceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schema_document: Any = Field(alias="schema")
    instance: Any


class ApiRequestError(Exception):
    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail or {}


_engine_lock = threading.Lock()
_engine_cache: tuple[str | None, ValidationEngine] | None = None


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Ensure every response has a request id header."""

    request_id = uuid.uuid4().hex
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception:  # noqa: BLE001
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="INTERNAL_ERROR",
            status_code=500,
            failure_stage="middleware",
        )
        response = _error_response(
            status_code=500,
            error_code="INTERNAL_ERROR",
            message="internal server error",
            request_id=request_id,
            detail={"path": request.url.path},
        )
    response.headers.setdefault(_REQUEST_ID_HEADER, request_id)
    return response


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    """Liveness endpoint."""

    return {"status": "ok"}


@app.get("/v1/meta")
async def meta_v1(request: Request) -> JSONResponse:
    """Supported keywords and formats of the served library."""

    request_id = _request_id_from_request(request)
    if not _meta_enabled():
        return _error_response(
            status_code=404,
            error_code="NOT_FOUND",
            message="meta endpoint is disabled",
            request_id=request_id,
            detail={"path": request.url.path},
        )

    try:
        engine = _get_engine()
    except ValueError as exc:
        return _configuration_error(request_id, exc, failure_stage="load_policy")

    payload = {
        "keywords": engine.library.keywords(),
        "formats": engine.library.formats(),
        "policy": engine.policy.model_dump(mode="json"),
        "version": _package_version(),
    }
    return JSONResponse(
        status_code=200,
        headers={_REQUEST_ID_HEADER: request_id},
        content=payload,
    )


@app.post("/v1/validate/schema")
async def validate_schema_v1(request: Request) -> JSONResponse:
    """Check the syntax of one schema document."""

    return await _handle_validation(request, "schema")


@app.post("/v1/validate/instance")
async def validate_instance_v1(request: Request) -> JSONResponse:
    """Syntax-check a schema, then validate one instance against it."""

    return await _handle_validation(request, "instance")


async def _handle_validation(request: Request, kind: Literal["schema", "instance"]) -> JSONResponse:
    started = time.perf_counter()
    request_id = _request_id_from_request(request)
    failure_stage = "parse_body"

    try:
        body = await _read_body_with_limit(request)
        model = SchemaRequest if kind == "schema" else InstanceRequest
        parsed = _parse_body(body, model)

        failure_stage = "load_policy"
        try:
            engine = _get_engine()
        except ValueError as exc:
            return _configuration_error(request_id, exc, failure_stage=failure_stage)

        _log_event(logging.INFO, "start", request_id, kind=kind, body_bytes=len(body))

        failure_stage = "validate"
        outcome = await run_in_threadpool(_run_validation, engine, parsed)
    except ApiRequestError as exc:
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code=exc.error_code,
            status_code=exc.status_code,
            failure_stage=failure_stage,
        )
        return _error_response(
            status_code=exc.status_code,
            error_code=exc.error_code,
            message=exc.message,
            request_id=request_id,
            detail=exc.detail,
        )
    except Exception as exc:  # noqa: BLE001
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code="INTERNAL_ERROR",
            status_code=500,
            failure_stage=failure_stage,
        )
        return _error_response(
            status_code=500,
            error_code="INTERNAL_ERROR",
            message="internal server error",
            request_id=request_id,
            detail={"error": str(exc), "total_ms": _elapsed_ms(started)},
        )

    exit_code = int(outcome.ret_code)
    _log_event(
        logging.INFO,
        "done",
        request_id,
        kind=outcome.kind,
        exit_code=exit_code,
        messages=len(outcome.report),
        total_ms=_elapsed_ms(started),
    )
    return JSONResponse(
        status_code=200,
        headers={_REQUEST_ID_HEADER: request_id},
        content=_build_result(outcome, request_id),
    )


def _run_validation(engine: ValidationEngine, parsed: SchemaRequest | InstanceRequest) -> ValidationOutcome:
    schema_report = engine.validate_schema(parsed.schema_document)
    if isinstance(parsed, SchemaRequest) or not schema_report.success:
        return ValidationOutcome("schema", "schema", schema_report)
    report = engine.validate_instance(parsed.schema_document, parsed.instance)
    return ValidationOutcome("instance", "instance", report)


def _build_result(outcome: ValidationOutcome, request_id: str) -> dict[str, Any]:
    report: ProcessingReport = outcome.report
    return {
        "kind": outcome.kind,
        "success": report.success,
        "exit_code": int(outcome.ret_code),
        "messages": report.to_structured(),
        "request_id": request_id,
    }


async def _read_body_with_limit(request: Request) -> bytes:
    max_bytes = _max_body_bytes()
    chunks: list[bytes] = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > max_bytes:
            raise ApiRequestError(
                status_code=413,
                error_code="PAYLOAD_TOO_LARGE",
                message="request body too large",
                detail={"max_body_bytes": max_bytes},
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _parse_body(body: bytes, model: type[SchemaRequest] | type[InstanceRequest]):
    try:
        raw = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_ARGUMENT",
            message="request body must be valid JSON",
            detail={"error": str(exc)},
        ) from exc

    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise ApiRequestError(
            status_code=400,
            error_code="INVALID_ARGUMENT",
            message="request body failed validation",
            detail={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


def _get_engine() -> ValidationEngine:
    """Return the shared engine, rebuilt when the policy path changes."""

    global _engine_cache
    raw_path = os.getenv("SCHEMAOPS_POLICY_PATH") or None
    with _engine_lock:
        if _engine_cache is not None and _engine_cache[0] == raw_path:
            return _engine_cache[1]
        policy = load_policy(Path(raw_path) if raw_path is not None else None)
        engine = ValidationEngine(build_default_library(), policy=policy)
        _engine_cache = (raw_path, engine)
        return engine


def _configuration_error(request_id: str, exc: ValueError, *, failure_stage: str) -> JSONResponse:
    _log_event(
        logging.ERROR,
        "error",
        request_id,
        error_code="INVALID_CONFIGURATION",
        status_code=500,
        failure_stage=failure_stage,
    )
    return _error_response(
        status_code=500,
        error_code="INVALID_CONFIGURATION",
        message="server validation policy is invalid",
        request_id=request_id,
        detail={"error": str(exc)},
    )


def _request_id_from_request(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str) and request_id:
        return request_id
    generated = uuid.uuid4().hex
    request.state.request_id = generated
    return generated


def _meta_enabled() -> bool:
    raw = os.getenv("SCHEMAOPS_ENABLE_META", "1").strip().lower()
    return raw not in {"0", "false", "off", "no"}


def _max_body_bytes() -> int:
    raw = os.getenv("SCHEMAOPS_MAX_BODY_BYTES")
    if raw is None:
        return _DEFAULT_MAX_BODY_BYTES
    try:
        parsed = int(raw)
    except ValueError:
        return _DEFAULT_MAX_BODY_BYTES
    return parsed if parsed > 0 else _DEFAULT_MAX_BODY_BYTES


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def _package_version() -> str:
    try:
        return importlib.metadata.version("schemaops")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def _error_response(
    *,
    status_code: int,
    error_code: str,
    message: str,
    request_id: str,
    detail: dict[str, Any] | None = None,
) -> JSONResponse:
    payload_detail = dict(detail or {})
    payload_detail["request_id"] = request_id

    return JSONResponse(
        status_code=status_code,
        headers={_REQUEST_ID_HEADER: request_id},
        content={
            "error_code": error_code,
            "message": message,
            "detail": payload_detail,
        },
    )


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _log_event(level: int, event: str, request_id: str, **fields: Any) -> None:
    payload = {
        "event": event,
        "request_id": request_id,
        **fields,
    }
    logger.log(level, _dump_json(payload))
