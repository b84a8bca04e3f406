# qa_engine/server.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qa_engine.config import settings
from qa_engine.common.logger import LoggerFactory, LoggerType, LogLevel
from qa_engine.infra.di.container import get_container
from qa_engine.app.api.routers.health_router import router as health_router
from qa_engine.app.api.routers.qa_router import router as qa_router

logger = LoggerFactory.get_logger(
    name="server",
    logger_type=LoggerType.STANDARD,
    level=LogLevel.DEBUG if settings.DEBUG else LogLevel.parse(settings.LOG_LEVEL),
    log_file=settings.LOG_FILE,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Target API: {settings.API_BASE_URL}")
    get_container()
    logger.info("Dependency injection container configured")

    yield

    logger.info("Shutting down...")
    LoggerFactory.clear_cache()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Runs QA checks against the invoicing platform and reports system health",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(qa_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": str(exc)},
    )


def run() -> None:
    import uvicorn

    uvicorn.run(
        "qa_engine.server:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
