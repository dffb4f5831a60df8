"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse
from sqlalchemy import text

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.metrics import build_metrics_response, instrument_http_request
from app.modules.apply.router import router as apply_router
from app.modules.catalog.router import router as catalog_router
from app.modules.contact.router import router as contact_router
from app.modules.enrollment.router import router as enrollment_router
from app.modules.identity.router import router as identity_router
from app.modules.student.router import router as student_router
from app.modules.timetable.router import router as timetable_router
from app.shared.exceptions import register_exception_handlers
from app.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)


def _landing_page_html() -> str:
    """Build minimal landing page for root path."""
    return f"""
<!doctype html>
<html lang="ja">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{settings.app_name} API</title>
    <style>
      body {{
        margin: 0;
        font-family: "Hiragino Sans", "Noto Sans JP", Arial, sans-serif;
        background: #f5f7fb;
        color: #1c2a34;
      }}
      .container {{
        max-width: 860px;
        margin: 48px auto;
        padding: 0 20px;
      }}
      .hero {{
        background: #ffffff;
        border-radius: 16px;
        border: 1px solid #dce3ea;
        padding: 28px;
      }}
      h1 {{
        margin: 0 0 12px;
        font-size: 2rem;
      }}
      .links {{
        margin-top: 22px;
        display: grid;
        grid-template-columns: repeat(auto-fit, minmax(180px, 1fr));
        gap: 10px;
      }}
      a {{
        display: block;
        text-decoration: none;
        border-radius: 10px;
        border: 1px solid #c6d2db;
        background: #f9fbff;
        color: #16384a;
        padding: 10px 12px;
      }}
      code {{
        display: inline-block;
        margin-top: 10px;
        font-size: 0.9rem;
        background: #eef2f6;
        border-radius: 6px;
        padding: 4px 6px;
      }}
    </style>
  </head>
  <body>
    <main class="container">
      <section class="hero">
        <h1>{settings.app_name} API</h1>
        <p>講座案内・時間割・お申し込み・お問い合わせ・生徒ページのバックエンドです。</p>
        <div class="links">
          <a href="/docs">API ドキュメント</a>
          <a href="{settings.api_prefix}/catalog/courses">講座一覧</a>
          <a href="/health">Health</a>
          <a href="/ready">Ready</a>
          <a href="/metrics">Metrics</a>
        </div>
        <code>API prefix: {settings.api_prefix}</code>
      </section>
    </main>
  </body>
</html>
"""


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application startup and shutdown hooks."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Starting %s (env=%s)", settings.app_name, settings.app_env)
    if not settings.oauth_client_id:
        logger.warning("OAUTH_CLIENT_ID is not set; student sign-in will fail")

    yield

    logger.info("Shutting down %s", settings.app_name)
    await close_engine()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)

register_exception_handlers(app)

app.include_router(identity_router, prefix=settings.api_prefix)
app.include_router(catalog_router, prefix=settings.api_prefix)
app.include_router(timetable_router, prefix=settings.api_prefix)
app.include_router(apply_router, prefix=settings.api_prefix)
app.include_router(enrollment_router, prefix=settings.api_prefix)
app.include_router(contact_router, prefix=settings.api_prefix)
app.include_router(student_router, prefix=settings.api_prefix)


@app.get("/", include_in_schema=False, response_class=HTMLResponse)
async def landing_page() -> HTMLResponse:
    """Root page with quick navigation links."""
    return HTMLResponse(content=_landing_page_html())


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness probe endpoint."""
    return {"status": "ok"}


async def _is_database_ready() -> bool:
    """Return True if DB accepts basic queries."""
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Database readiness check failed")
        return False


@app.get("/ready")
async def readiness_check() -> dict[str, str]:
    """Readiness probe endpoint with DB dependency check."""
    if not await _is_database_ready():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not ready",
        )
    return {
        "status": "ready",
        "database": "ok",
        "timestamp": utc_now().isoformat(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Prometheus metrics endpoint."""
    return build_metrics_response()
