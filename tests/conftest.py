"""
Shared fixtures: a scripted FakeYou API served through httpx.MockTransport.

Routes are registered per (method, path). Each route holds a queue of
responses; the last one repeats once the queue is drained, so
"pending, pending, complete_success" scripts a job that finishes on the
third query and stays finished.
"""
from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from fakeyou.client import FakeYouClient
from fakeyou.core.config import Settings
from fakeyou.core.logging import configure_logging

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeVendor:
    """Minimal stand-in for api.fakeyou.com."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Responder]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Responder) -> None:
        self.routes.setdefault((method.upper(), path), []).extend(responses)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"success": False, "error_reason": "not found"})
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(responder):
            return responder(request)
        return responder


def tts_job_body(token: str, status: str, path: str | None = None, success: bool = True) -> Dict[str, Any]:
    return {
        "success": success,
        "state": {
            "job_token": token,
            "status": status,
            "maybe_public_bucket_wav_audio_path": path,
        },
    }


def face_job_body(token: str, status: str, path: str | None = None) -> Dict[str, Any]:
    return {
        "success": True,
        "state": {
            "job_token": token,
            "request": {
                "inference_category": "lipsync_animation",
                "maybe_model_type": "sad_talker",
                "maybe_model_token": None,
                "maybe_model_title": "Face Animator",
                "maybe_raw_inference_text": None,
            },
            "status": {
                "status": status,
                "maybe_extra_status_description": None,
                "maybe_assigned_worker": "worker-1",
                "maybe_assigned_cluster": "cluster-a",
                "maybe_first_started_at": "2026-10-19T10:00:00Z",
                "attempt_count": 1,
                "require_keepalive": False,
                "maybe_failure_category": None,
            },
            "maybe_result": {
                "entity_type": "media_file",
                "entity_token": "MF:1",
                "maybe_public_bucket_media_path": path,
                "maybe_successfully_completed_at": "2026-10-19T10:01:00Z",
            } if path else None,
            "created_at": "2026-10-19T10:00:00Z",
            "updated_at": "2026-10-19T10:01:00Z",
        },
    }


def request_json(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content)


def run(coro):
    """Drive a coroutine to completion from a sync test."""
    return asyncio.run(coro)


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with zero poll delays and a small attempt bound."""
    return Settings(raw={
        "api": {"base_url": "https://api.test"},
        "polling": {
            "tts_interval_s": 0,
            "face_animation_interval_s": 0,
            "max_attempts": 5,
            "timeout_s": 30,
        },
        "logging": {"level": 1},
    })


@pytest.fixture
def restore_logging(monkeypatch):
    """Reconfigure logging from a clean environment after the test."""
    yield
    for name in ("FAKEYOU_LOG_DIR", "FAKEYOU_LOG_LEVEL", "FAKEYOU_JSONL_FILE"):
        monkeypatch.delenv(name, raising=False)
    configure_logging(force=True)


@pytest.fixture
def vendor() -> FakeVendor:
    return FakeVendor()


@pytest.fixture
def make_client(vendor, fast_settings):
    """Factory building a FakeYouClient wired to the fake vendor."""
    def _make(settings: Settings | None = None) -> FakeYouClient:
        config = (settings or fast_settings).get_client_config()
        return FakeYouClient(config, transport=httpx.MockTransport(vendor.handler))
    return _make
