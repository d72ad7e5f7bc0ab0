"""
FastAPI main application for the BridgeYou forum API.
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from bridgeyou import __version__
from bridgeyou.config import get_app_settings
from bridgeyou.db import init_db, close_db
from bridgeyou.routers import banks, comments, corrections, notifications, posts, search
from bridgeyou.routers.dependencies import build_services

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = get_app_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    logger.info("Starting BridgeYou API...")
    await init_db(settings)
    logger.info("Database initialized")

    app.state.services = build_services(settings)

    yield

    # Shutdown
    logger.info("Shutting down BridgeYou API...")
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Finance careers forum: posts, search, corrections and notifications",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": __version__
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": settings.app_name,
        "docs": "/docs",
        "health": "/health"
    }


app.include_router(search.router, prefix="/api", tags=["search"])
app.include_router(banks.router, prefix="/api", tags=["banks"])
app.include_router(posts.router, prefix="/api", tags=["posts"])
app.include_router(comments.router, prefix="/api", tags=["comments"])
app.include_router(corrections.router, prefix="/api", tags=["corrections"])
app.include_router(notifications.router, prefix="/api", tags=["notifications"])
