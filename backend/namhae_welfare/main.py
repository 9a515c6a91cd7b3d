"""
Namhae Welfare — FastAPI Application Entry Point
Welfare survey and recommendation backend for elderly residents of Namhae county.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from namhae_welfare.config import get_settings
from namhae_welfare.core.database import get_database
from namhae_welfare.core.errors import WelfareError
from namhae_welfare.services.welfare_catalog import get_welfare_catalog
from namhae_welfare.utils.rate_limiter import RateLimiter
from namhae_welfare.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = get_settings()
    logger.info(f"🚀 Namhae Welfare starting in {settings.app_env} mode...")
    logger.info(f"🗄️ Database: {settings.resolved_database_path}")
    logger.info(f"📚 Welfare services: {len(get_welfare_catalog().list_services())}")
    logger.info(f"🎯 Recommendation limit: {settings.recommendation_limit}")
    rate = settings.rate_limit_per_minute
    logger.info(f"🛡️ Rate limit: {f'{rate}/min' if rate > 0 else 'OFF'}")

    yield

    logger.info("👋 Namhae Welfare shutting down...")


settings = get_settings()

app = FastAPI(
    title="Namhae Welfare",
    description="남해군 어르신 복지 서비스 추천 — survey-driven welfare program recommendations.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Middleware Stack ---
app.add_middleware(RateLimiter, requests_per_minute=settings.rate_limit_per_minute)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error Handlers ---
@app.exception_handler(WelfareError)
async def welfare_error_handler(request: Request, exc: WelfareError):
    if exc.status_code >= 500:
        logger.error(f"❌ {type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content={"error": "요청 형식이 올바르지 않습니다. " + "; ".join(problems)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "서버 오류가 발생했습니다. 잠시 후 다시 시도해주세요."},
    )


# --- Health Check ---
@app.get("/", tags=["Health"])
async def root():
    return {
        "status": "healthy",
        "service": "Namhae Welfare",
        "version": "1.0.0",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    current = get_settings()
    storage_ok = get_database().ping()
    return {
        "status": "healthy" if storage_ok else "degraded",
        "environment": current.app_env,
        "services": {
            "database": storage_ok,
            "rate_limiter": current.rate_limit_per_minute > 0,
        },
    }


# --- Register Routers ---
from namhae_welfare.api import users, survey, recommendations, welfare

app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(survey.router, prefix="/api/survey", tags=["Survey"])
app.include_router(recommendations.router, prefix="/api", tags=["Recommendations"])
app.include_router(welfare.router, prefix="/api/welfare-services", tags=["Welfare Services"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "namhae_welfare.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
    )
