from __future__ import annotations

import logging
from pathlib import Path

import httpx
import pytest

from apps.api import main as api_main
from apps.api.main import app


@pytest.mark.anyio
async def test_body_over_limit_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCHEMAOPS_MAX_BODY_BYTES", "64")
    body = {"schema": {"enum": ["x" * 200]}}

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post("/v1/validate/schema", json=body)

    assert response.status_code == 413
    payload = response.json()
    assert payload["error_code"] == "PAYLOAD_TOO_LARGE"
    assert payload["detail"]["max_body_bytes"] == 64


@pytest.mark.anyio
async def test_invalid_max_body_env_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCHEMAOPS_MAX_BODY_BYTES", "not-a-number")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post("/v1/validate/schema", json={"schema": {}})

    assert response.status_code == 200


@pytest.mark.anyio
async def test_policy_path_env_controls_served_engine(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    policy = tmp_path / "policy.yaml"
    policy.write_text("unknown_keywords: warning\n", encoding="utf-8")
    monkeypatch.setenv("SCHEMAOPS_POLICY_PATH", str(policy))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post("/v1/validate/schema", json={"schema": {"x-vendor": 1}})

    payload = response.json()
    assert payload["success"] is True
    assert [(m["level"], m["keyword"]) for m in payload["messages"]] == [("warning", "x-vendor")]


@pytest.mark.anyio
async def test_invalid_policy_path_is_a_server_configuration_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SCHEMAOPS_POLICY_PATH", str(tmp_path / "missing.yaml"))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post("/v1/validate/schema", json={"schema": {}})

    assert response.status_code == 500
    assert response.json()["error_code"] == "INVALID_CONFIGURATION"


@pytest.mark.anyio
async def test_validation_stage_value_error_is_an_internal_error(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    def _broken_validation(engine, parsed):
        raise ValueError("boom")

    monkeypatch.setattr(api_main, "_run_validation", _broken_validation)
    caplog.set_level(logging.INFO, logger="schemaops.api")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post("/v1/validate/schema", json={"schema": {}})

    assert response.status_code == 500
    payload = response.json()
    assert payload["error_code"] == "INTERNAL_ERROR"
    assert payload["detail"]["error"] == "boom"
    messages = [record.message for record in caplog.records if record.name == "schemaops.api"]
    assert any(
        '"error_code":"INTERNAL_ERROR"' in message and '"failure_stage":"validate"' in message
        for message in messages
    )
