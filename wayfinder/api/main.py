"""FastAPI application serving route quotes.

Snapshots arrive in the request body, so the only guard here is a cap on
body size. Rate limiting belongs to the reverse proxy.
"""

import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wayfinder import __version__
from wayfinder.api.endpoints import router

# Bind address and reload flag
HOST = os.environ.get("WAYFINDER_HOST", "0.0.0.0")
PORT = int(os.environ.get("WAYFINDER_PORT", "8000"))
DEBUG = os.environ.get("WAYFINDER_DEBUG", "false").lower() in ("true", "1", "yes")

# Largest accepted snapshot payload, in bytes
MAX_REQUEST_SIZE = 10 * 1024 * 1024

app = FastAPI(
    title="Wayfinder",
    description="Best-output multi-hop routing across constant-product pools",
    version=__version__,
)


@app.middleware("http")
async def reject_oversized_body(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Answer 413 when the declared body size is over MAX_REQUEST_SIZE."""
    declared = request.headers.get("content-length")
    if declared and int(declared) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - WAYFINDER_HOST: Host to bind to (default: 0.0.0.0)
    - WAYFINDER_PORT: Port to bind to (default: 8000)
    - WAYFINDER_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "wayfinder.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
