"""
ReviewFlow - Gestión de reseñas
===============================

Aplicación principal FastAPI.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Depends, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
import time

from reviewflow.core.config import settings
from reviewflow.core.database import get_db, init_db, close_db
from reviewflow.core.exceptions import ValidationFailure, NotFoundError, StorageError


# Configurar logging estructurado
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if settings.is_production
            else structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Maneja el ciclo de vida de la aplicación.
    """
    logger.info("startup", app=settings.app_name, env=settings.app_env)
    await init_db()
    logger.info("database_ready")

    yield

    logger.info("shutdown", app=settings.app_name)
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="""
    ## Gestión de reseñas de clientes

    - Ingreso y respuesta de reseñas (manual o por plantilla)
    - Campañas para solicitar reseñas a clientes
    - Analytics: panel, tendencias, distribución y reporte mensual

    ### Autenticación
    Header `Authorization: Bearer <api_key>`
    """,
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    if settings.is_development or process_time > 1000:
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(process_time, 2)
        )

    response.headers["X-Process-Time"] = str(round(process_time, 2))
    return response


# ===========================================
# MANEJO DE ERRORES
# ===========================================

@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    logger.info("validation_failure", path=request.url.path, field=exc.field, error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "field": exc.field}
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.message}
    )


@app.exception_handler(StorageError)
@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: Exception):
    logger.error("storage_unavailable", path=request.url.path, method=request.method, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage temporarily unavailable", "retryable": True}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Error interno del servidor",
            "error": str(exc) if settings.is_development else None
        }
    )


# ===========================================
# ENDPOINTS BASE
# ===========================================

@app.get("/", tags=["Health"])
async def root():
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs" if settings.is_development else "disabled"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.app_env,
        "checks": {"api": "ok"}
    }


@app.get("/health/ready", tags=["Health"])
async def readiness_check():
    from reviewflow.core.database import engine

    checks = {"database": "unknown"}

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError as e:
        checks["database"] = f"error: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks
    }


# ===========================================
# INCLUIR ROUTERS
# ===========================================

from reviewflow.api.reviews import router as reviews_router
from reviewflow.api.campaigns import router as campaigns_router
from reviewflow.api.automation import router as automation_router
from reviewflow.api.analytics import router as analytics_router
from reviewflow.api.user import router as user_router

app.include_router(reviews_router, prefix="/api/reviews", tags=["Reviews"])
app.include_router(campaigns_router, prefix="/api/campaigns", tags=["Campaigns"])
app.include_router(automation_router, prefix="/api/automation", tags=["Automation"])
app.include_router(analytics_router, prefix="/api/analytics", tags=["Analytics"])
app.include_router(user_router, prefix="/api/user", tags=["User"])


# ===========================================
# SETUP
# ===========================================

@app.post("/setup/demo-user", tags=["Setup"])
async def create_demo_user(db: AsyncSession = Depends(get_db)):
    from reviewflow.services.demo_service import create_demo_user as seed_demo_user

    return await seed_demo_user(db)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "reviewflow.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development
    )
