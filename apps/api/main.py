"""TastyPlates review interactions API.

Run with:
    uvicorn apps.api.main:app --reload

Production-friendly entrypoint (uses PORT env fallback):
    python -m apps.api.main
"""

from __future__ import annotations

import logging
import os
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tastyplates.logging_setup import setup_logging

from .core.config import settings
from .core.hasura import HasuraClient, HasuraError
from .routers import restaurants, reviews, users

logger = logging.getLogger(__name__)

app = FastAPI(title="TastyPlates API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reviews.router)
app.include_router(users.router)
app.include_router(restaurants.router)


@app.exception_handler(HasuraError)
async def hasura_error_handler(request: Request, exc: HasuraError):
    logger.error(f"{request.method} {request.url.path} failed upstream: {exc}")
    return JSONResponse(
        status_code=502,
        content={"detail": {"code": "upstream_error", "message": "Review service unavailable"}},
    )


@app.on_event("startup")
async def startup_event():
    logger.info(f"CORS origins: {settings.CORS_ORIGINS}")
    app.state.hasura = HasuraClient(
        settings.HASURA_GRAPHQL_URL,
        settings.HASURA_ADMIN_SECRET,
        timeout=settings.HASURA_TIMEOUT_SECONDS,
    )
    logger.info(f"Hasura endpoint: {settings.HASURA_GRAPHQL_URL}")


@app.on_event("shutdown")
async def shutdown_event():
    hasura = getattr(app.state, "hasura", None)
    if hasura is not None:
        await hasura.aclose()


@app.get("/")
def health_check():
    return {"status": "ok", "service": "TastyPlates API"}


def _get_cli_arg(argv: list[str], flag: str) -> str | None:
    for i, arg in enumerate(argv):
        if arg == flag and i + 1 < len(argv):
            return argv[i + 1]
        if arg.startswith(f"{flag}="):
            return arg.split("=", 1)[1]
    return None


def _resolve_port(argv: list[str]) -> int:
    cli_port = _get_cli_arg(argv, "--port")
    if cli_port is not None:
        return int(cli_port)

    env_port = os.getenv("PORT")
    if env_port:
        return int(env_port)

    return 8000


def _resolve_host(argv: list[str]) -> str:
    cli_host = _get_cli_arg(argv, "--host")
    if cli_host is not None:
        return cli_host
    return os.getenv("HOST", "0.0.0.0")


if __name__ == "__main__":
    import uvicorn

    args = sys.argv[1:]
    setup_logging(logging.DEBUG if "--reload" in args else logging.INFO)
    uvicorn.run(
        "apps.api.main:app",
        host=_resolve_host(args),
        port=_resolve_port(args),
        reload="--reload" in args,
    )
