"""Unit tests for model provisioning over the /api/pull progress stream."""

from __future__ import annotations

import io
import json
from unittest.mock import MagicMock

import httpx
import pytest

import llm.model_provisioner as provisioner_module
from http_clients.client_factory import build_ollama_http_client
from llm.model_provisioner import ModelProvisioner, format_progress_line
from schemas.errors import ProvisioningFailure
from schemas.provisioning import ProvisioningProgress


def _ndjson(*records: dict) -> bytes:
    return b"".join(json.dumps(r).encode() + b"\n" for r in records)


def _provisioner(settings, handler):
    out = io.StringIO()
    http = build_ollama_http_client(settings, transport=httpx.MockTransport(handler))
    return ModelProvisioner(http, out=out), out


# ── format_progress_line ─────────────────────────────────────────────────────


def test_format_progress_line_half_done():
    progress = ProvisioningProgress(
        status="downloading", digest="sha1", completed=1048576, total=2097152
    )
    assert format_progress_line(progress) == "\rdownloading (50.00%) [1 MB/2 MB]"


# ── ensure_model_available ───────────────────────────────────────────────────


def test_pull_renders_progress_and_new_line_per_digest(settings):
    seen: list[httpx.Request] = []
    body = _ndjson(
        {"status": "pulling manifest"},
        {"status": "downloading", "digest": "sha1", "completed": 1048576, "total": 2097152},
        {"status": "downloading", "digest": "sha1", "completed": 2097152, "total": 2097152},
        {"status": "downloading", "digest": "sha2", "completed": 0, "total": 1048576},
        {"status": "verifying sha256 digest"},
        {"status": "success"},
    )

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=body)

    provisioner, out = _provisioner(settings, handler)
    provisioner.ensure_model_available("mistral")

    text = out.getvalue()
    assert text.startswith("Pulling the selected model: mistral")
    assert "\rdownloading (50.00%) [1 MB/2 MB]" in text
    assert "\rdownloading (100.00%) [2 MB/2 MB]" in text
    assert "\rdownloading (0.00%) [0 MB/1 MB]" in text
    # One fresh line per digest: sha1, then sha2
    assert text.count("\n\r") == 2
    assert text.index("(100.00%)") < text.index("\n\rdownloading (0.00%)")
    assert text.endswith("\n\n")

    request = seen[0]
    assert str(request.url) == "http://ollama.test:11434/api/pull"
    assert json.loads(request.content) == {"model": "mistral", "stream": True}
    assert "Authorization" not in request.headers


def test_pull_succeeds_without_done_record(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"")

    provisioner, out = _provisioner(settings, handler)
    provisioner.ensure_model_available("mistral")
    assert out.getvalue() == "Pulling the selected model: mistral\n\n"


def test_pull_is_idempotent_within_process(settings):
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, content=_ndjson({"status": "success"}))

    provisioner, _ = _provisioner(settings, handler)
    provisioner.ensure_model_available("mistral")
    provisioner.ensure_model_available("mistral")
    assert len(calls) == 1


def test_pull_connection_error_is_provisioning_failure(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provisioner, _ = _provisioner(settings, handler)
    with pytest.raises(ProvisioningFailure) as exc_info:
        provisioner.ensure_model_available("mistral")

    message = str(exc_info.value)
    assert "Failed to pull the model: mistral" in message
    assert "connection refused" in message
    assert "Is the ollama instance running?" in message


def test_pull_read_error_mid_stream_is_provisioning_failure(settings):
    def chunks():
        yield _ndjson({"status": "downloading", "digest": "sha1", "completed": 1, "total": 2})
        raise httpx.ReadError("connection reset")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=chunks())

    provisioner, _ = _provisioner(settings, handler)
    with pytest.raises(ProvisioningFailure):
        provisioner.ensure_model_available("mistral")


def test_pull_error_record_is_provisioning_failure(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=_ndjson({"error": "pull model manifest: file does not exist"}))

    provisioner, _ = _provisioner(settings, handler)
    with pytest.raises(ProvisioningFailure) as exc_info:
        provisioner.ensure_model_available("no-such-model")
    assert exc_info.value.model == "no-such-model"
    assert "file does not exist" in exc_info.value.cause


def test_pull_http_error_status_is_provisioning_failure(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="internal error")

    provisioner, _ = _provisioner(settings, handler)
    with pytest.raises(ProvisioningFailure) as exc_info:
        provisioner.ensure_model_available("mistral")
    assert "HTTP 500" in exc_info.value.cause


def test_pull_undecodable_line_is_provisioning_failure(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"{not json}\n")

    provisioner, _ = _provisioner(settings, handler)
    with pytest.raises(ProvisioningFailure):
        provisioner.ensure_model_available("mistral")


@pytest.mark.parametrize(
    "status, body",
    [
        (500, b"internal error"),
        (200, _ndjson({"error": "pull model manifest: file does not exist"})),
    ],
    ids=["http-error-status", "error-record"],
)
def test_pull_failure_is_logged_before_raising(settings, monkeypatch, status, body):
    mock_logger = MagicMock()
    monkeypatch.setattr(provisioner_module, "logger", mock_logger)

    provisioner, _ = _provisioner(settings, lambda request: httpx.Response(status, content=body))
    with pytest.raises(ProvisioningFailure):
        provisioner.ensure_model_available("mistral")

    mock_logger.error.assert_called_once()
    args, kwargs = mock_logger.error.call_args
    assert args[0] == "model_pull_failed"
    assert kwargs["model"] == "mistral"
    assert isinstance(kwargs["exc"], ProvisioningFailure)
