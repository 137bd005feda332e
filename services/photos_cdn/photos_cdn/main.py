import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from photos_cdn.config import Settings, get_settings
from photos_cdn.router import router as photos_router
from photos_cdn.service import ResizeContext, build_context
from shared.middleware.error_handler import error_envelope_middleware
from shared.middleware.request_id import request_id_middleware


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Photos CDN

On-demand resizing for a photo collection stored in S3.

* **Redirects** — every request answers with a `301` to a public S3 URL,
  cacheable for a year.
* **Variants** — `f=thumb` (square crop), `f=placeholder` (16px square),
  `f=scaled` (fixed width), `f=raw` (the original).
* **Lazy cache** — variants are transcoded to WebP on first request and
  stored in the resized bucket; later requests only check for existence.

### Example
```
GET /2023-12-10/1000013814-01.jpeg?f=thumb&w=500&q=8
301 Location: https://<resized-bucket>.s3.<region>.amazonaws.com/2023-12-10/1000013814-01.thumb-500-8.webp
```
"""


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

def create_app(
    settings: Settings | None = None,
    context: ResizeContext | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s:%(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context is None:
            app.state.resize_context = build_context(settings)
        yield

    app = FastAPI(
        title="Photos CDN",
        version="1.0.0",
        description=_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    if context is not None:
        app.state.resize_context = context

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET"],
        allow_headers=["*"],
        max_age=600,
    )

    # Registered before the catch-all photo route
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="photos-cdn")

    app.include_router(photos_router)

    return app


app = create_app()
