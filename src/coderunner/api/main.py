"""
FastAPI application for the code execution service.

This module configures the FastAPI application, registers the execution
route and enforces the optional API key.  The editor posts source code and
a language tag to ``/execute`` and receives the program output or an
error message.
"""

from __future__ import annotations

import logging
from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import Config
from ..dispatcher import Dispatcher
from ..errors import UnsupportedLanguage
from ..models import ErrorResponse, ExecuteRequest, ExecuteResponse, LanguagesResponse


logger = logging.getLogger("coderunner")

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[coderunner] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.setLevel(logging.INFO)


config = Config.from_env()

logger.info(
    "Loaded config: work_dir=%s, allowed_langs=%s, build_timeout_ms=%s, run_timeout_ms=%s",
    config.work_dir,
    [lang.value for lang in config.allowed_langs],
    config.build_timeout_ms,
    config.run_timeout_ms,
)

dispatcher = Dispatcher.from_config(config)


app = FastAPI(title="Code Execution Service", version="0.1.0")


@app.middleware("http")
async def authenticate(request, call_next):
    """Middleware to enforce API key authentication when a key is configured."""
    path = request.url.path
    method = request.method
    client = getattr(request.client, "host", "unknown")

    logger.info("Incoming request: %s %s from %s", method, path, client)

    if config.api_key and method != "OPTIONS":
        provided_key = request.headers.get("x-api-key")
        if provided_key != config.api_key:
            logger.warning("Invalid API key for %s %s from %s", method, path, client)
            return JSONResponse(status_code=401, content={"error": "Invalid API key"})

    response = await call_next(request)
    logger.info("Response: %s %s -> %s", method, path, response.status_code)
    return response


# Registered after the auth middleware so that it wraps it and 401 responses
# still carry CORS headers.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UnsupportedLanguage)
async def unsupported_language(request, exc: UnsupportedLanguage) -> JSONResponse:
    logger.warning("Unsupported language: %r", exc.language)
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.get("/health")
async def health() -> Dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}


@app.get("/languages", response_model=LanguagesResponse)
async def languages() -> LanguagesResponse:
    """List the languages this server executes."""
    return LanguagesResponse(languages=dispatcher.languages)


@app.post(
    "/execute",
    response_model=ExecuteResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
def execute(req: ExecuteRequest) -> ExecuteResponse:
    """Run the submitted program.

    Declared as a plain function so that FastAPI runs it in its thread
    pool; a long-running child process only blocks its own request.
    """
    return dispatcher.dispatch(req)
