"""
AlgoSensei API - FastAPI application entry point
Algorithm-tutoring backend: accounts, chat history, streaming tutor replies
"""

import logging

from algosensei.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(levelname)s:%(name)s:%(message)s"
)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from algosensei.middleware.rate_limiter import setup_rate_limiting
from algosensei.utils.error_handlers import setup_error_handlers

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Algorithm and data-structure tutoring service",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "authentication", "description": "Registration and session management"},
        {"name": "chats", "description": "Chat history"},
        {"name": "ai", "description": "Streaming tutor replies"}
    ]
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_rate_limiting(app)
setup_error_handlers(app)


@app.on_event("startup")
async def startup_event():
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} started")
    logger.info(f"Storage backend: {settings.STORAGE_BACKEND}")
    logger.info(f"API Docs: http://{settings.API_HOST}:{settings.API_PORT}/docs")


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy"
    }


@app.get("/health")
async def health_check():
    """Detailed health check"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "storage": settings.STORAGE_BACKEND,
        "memory": "enabled" if settings.MEM0_API_KEY else "disabled"
    }


# Import and register routers
from algosensei.api import auth, chats, ai

app.include_router(auth.router)
app.include_router(chats.router)
app.include_router(ai.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "algosensei.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD
    )
