from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
import sentry_sdk

from resume_builder.api.v1.health import router as health_router
from resume_builder.api.v1.resume import router as resume_router
from resume_builder.core.cors import cors_allowed_origins
from resume_builder.core.rate_limit import limiter
from resume_builder.core.config import settings
from resume_builder.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Resume Builder API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    limited = _rate_limit_exceeded_handler(request, exc)
    headers = {
        key: value
        for key, value in limited.headers.items()
        if key.startswith("x-ratelimit-") or key == "retry-after"
    }
    content = {
        "success": False,
        "error": f"Rate limit exceeded ({exc.detail}). Please try again later.",
    }
    reset_at = headers.get("x-ratelimit-reset")
    if reset_at:
        content["retry_after"] = datetime.fromtimestamp(float(reset_at), tz=timezone.utc).isoformat()
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=content,
        headers=headers,
    )


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    _ = request
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded)
app.add_exception_handler(StarletteHTTPException, _http_error)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(resume_router, prefix="/v1", tags=["Resume"])
