"""HTTP surface for the narration service.

Two JSON endpoints:
  POST /api/summarize  {username, user, repos, events}  → {summary, via}
  POST /api/compare    {a: Snapshot, b: Snapshot}       → {summary, via}

Failures answer ``{error}`` with the status carried by the gitscope error;
a 429 also carries ``retryAfter`` (seconds) when the upstream sent one.
Bodies are read raw and validated by the narration service rather than by
FastAPI models, so a malformed body is a 400 and never a 422.
"""

from __future__ import annotations

import json
import logging

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from gitscope_core import narration
from gitscope_core.config import load_config
from gitscope_core.errors import GitScopeError, RateLimitedError

logger = logging.getLogger(__name__)


def error_body(error: GitScopeError) -> dict:
    body: dict = {"error": error.message}
    if isinstance(error, RateLimitedError) and error.retry_after is not None:
        body["retryAfter"] = error.retry_after
    return body


async def _read_json(request: Request):
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def create_app(config: dict | None = None) -> FastAPI:
    """Build the FastAPI app. Credentials are resolved once, at creation."""
    config = config if config is not None else load_config()
    app = FastAPI(title="gitscope")

    @app.exception_handler(GitScopeError)
    async def _gitscope_error(request: Request, exc: GitScopeError):
        if exc.status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(error_body(exc), status_code=exc.status)

    @app.post("/api/summarize")
    async def summarize(request: Request):
        payload = await _read_json(request)
        result = await run_in_threadpool(narration.summarize, payload, config)
        return result.to_dict()

    @app.post("/api/compare")
    async def compare(request: Request):
        payload = await _read_json(request)
        result = await run_in_threadpool(narration.compare, payload, config)
        return result.to_dict()

    return app
