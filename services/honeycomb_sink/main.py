from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from .src.routers import events
from .src.config import service_settings
from .otel import init_tracing

# -----------------------
# Lifecycle hooks
# -----------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Shared client for connection pooling only; messages never live on it.
    # No timeout unless HONEYCOMB_TIMEOUT_S is set.
    client = httpx.AsyncClient(
        timeout=httpx.Timeout(service_settings.honeycomb_timeout_s),
        http2=True,
    )
    app.state.httpx_client = client
    try:
        yield
    finally:
        await client.aclose()

app = FastAPI(title="Honeycomb Sink", version="1.0.0", lifespan=lifespan)
app.include_router(events.router)

tracer = init_tracing(app, service_settings, service_version="v1")

@app.get("/health")
def health():
    return {"status": "ok", "service": service_settings.service_name}
