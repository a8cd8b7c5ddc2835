"""
FastAPI Application - Civic Issue Feed API
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import settings, ensure_directories
from database import init_database_async, close_engine
from utils.logger import init_logging
from .routes import router

init_logging("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    ensure_directories()
    await init_database_async()
    logger.info(f"API ready (scoring mode: {settings.SCORING_MODE})")
    yield
    # Shutdown
    await close_engine()


app = FastAPI(
    title="Civic Issue Feed",
    description="Citizen issue reports, comments and an urgency-ranked feed",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Civic Issue Feed",
        "version": "1.0.0",
        "status": "running"
    }


def run():
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT)
