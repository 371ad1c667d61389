import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s: %(message)s")
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from academy.catalog.router import router as catalog_router
from academy.certificates.router import router as certificates_router
from academy.database import dispose_db, init_db
from academy.dependencies import get_settings
from academy.free_mode.router import router as free_mode_router
from academy.learning.router import router as learning_router
from academy.payments.admin_router import router as payments_admin_router
from academy.payments.router import router as payments_router
from academy.rate_limit import limiter
from academy.ratings.router import router as ratings_router
from academy.stats.router import router as stats_router
from academy.videos.router import router as videos_router
from shared.database.redis_client import get_redis_client
from shared.middleware.error_handler import error_envelope_middleware
from shared.middleware.request_id import request_id_middleware

logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Academy Course Service

Course delivery with manually verified bank-transfer payments.

* **Catalog** — journeys, courses, search.
* **Videos** — per-course playlists with YouTube / Vimeo embed resolution.
* **Learning** — enrollment and per-video progress.
* **Payments** — users claim a transfer ("I have paid"); admins approve or reject.
  Approved orders unlock the course for good.
* **Free mode** — a global window during which every course is free.
* **Ratings & certificates** — one rating per user; certificates on 100% progress
  plus an approved certificate payment.

### Authentication
User endpoints take:
```
Authorization: Bearer <access_token>
```
Tokens are issued by the identity provider. `/admin/*` endpoints need the
`admin` or `super_admin` role.

### Error shape
All errors return a consistent JSON envelope:
```json
{ "detail": "Human-readable message" }
```
"""

_TAGS_METADATA = [
    {"name": "Catalog", "description": "Journeys and courses."},
    {"name": "Videos", "description": "Course playlists and admin video management."},
    {"name": "Learning", "description": "Enrollment and progress tracking."},
    {"name": "Payments", "description": "Access checks and payment claims."},
    {"name": "Admin — Payments", "description": "Review of payment claims."},
    {"name": "Free Mode", "description": "Global free-access window."},
    {"name": "Ratings", "description": "Course ratings."},
    {"name": "Certificates", "description": "Certificate requests and their review."},
    {"name": "Admin — Stats", "description": "Enrollment statistics."},
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.database_url)
    app.state.redis = get_redis_client(settings.redis_url)
    if app.state.redis is None:
        logger.info("Redis disabled; free-mode settings are read from the database")
    yield
    if app.state.redis is not None:
        await app.state.redis.aclose()
    await dispose_db()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Academy Course Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    for router in (
        catalog_router,
        videos_router,
        learning_router,
        payments_router,
        payments_admin_router,
        free_mode_router,
        ratings_router,
        certificates_router,
        stats_router,
    ):
        app.include_router(router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"], include_in_schema=True)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="academy")

    return app


app = create_app()
