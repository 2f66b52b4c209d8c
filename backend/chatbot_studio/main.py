"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatbot_studio.core.config import settings
from chatbot_studio.core.database import init_db, close_db
from chatbot_studio.core.redis import RedisClient
from chatbot_studio.core.logging import setup_logging, setup_request_logging
from chatbot_studio.core.exceptions import setup_exception_handlers


# Setup logging before anything else
setup_logging()

logger = logging.getLogger(__name__)


async def create_initial_admin() -> None:
    """Create initial admin user if not exists."""
    from chatbot_studio.core.database import async_session_maker
    from chatbot_studio.services.auth_service import AuthService

    async with async_session_maker() as session:
        admin = await AuthService.create_initial_admin(session)
        if admin:
            logger.info(f"Created initial admin user: {admin.email}")
        else:
            logger.info("Initial admin not created (exists or not configured)")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.
    Manages startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting up {settings.app_name}...")

    await init_db()
    logger.info("Database ready")

    await create_initial_admin()

    # Redis is connected lazily by the rate limiter, which fails open
    logger.info("All services initialized successfully!")

    yield

    # Shutdown
    logger.info("Shutting down...")

    await RedisClient.close()
    await close_db()

    logger.info("All connections closed")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Multi-tenant chatbot builder API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Setup exception handlers
setup_exception_handlers(app)

# Setup request logging
setup_request_logging(app)

# Configure CORS
cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
cors_origins.extend(settings.cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# API Routes
# =============================================================================

# API version prefix
API_V1_PREFIX = "/api/v1"


# Import and include routers
from chatbot_studio.api.auth.router import router as auth_router
from chatbot_studio.api.bots.router import router as bots_router
from chatbot_studio.api.chat.router import router as chat_router
from chatbot_studio.api.conversations.router import router as conversations_router
from chatbot_studio.api.documents.router import router as documents_router
from chatbot_studio.api.leads.router import router as leads_router
from chatbot_studio.api.subscriptions.router import router as subscriptions_router
from chatbot_studio.api.notifications.router import router as notifications_router
from chatbot_studio.api.integrations.router import router as integrations_router
from chatbot_studio.api.analytics.router import router as analytics_router
from chatbot_studio.api.health import router as health_router

app.include_router(auth_router, prefix=f"{API_V1_PREFIX}/auth", tags=["Auth"])
app.include_router(bots_router, prefix=f"{API_V1_PREFIX}/bots", tags=["Bots"])
app.include_router(chat_router, prefix=f"{API_V1_PREFIX}/chat", tags=["Chat"])
app.include_router(conversations_router, prefix=f"{API_V1_PREFIX}/conversations", tags=["Conversations"])
app.include_router(documents_router, prefix=f"{API_V1_PREFIX}/documents", tags=["Documents"])
app.include_router(leads_router, prefix=f"{API_V1_PREFIX}/leads", tags=["Leads"])
app.include_router(subscriptions_router, prefix=f"{API_V1_PREFIX}/subscriptions", tags=["Subscriptions"])
app.include_router(notifications_router, prefix=f"{API_V1_PREFIX}/notifications", tags=["Notifications"])
app.include_router(integrations_router, prefix=f"{API_V1_PREFIX}/integrations", tags=["Integrations"])
app.include_router(analytics_router, prefix=f"{API_V1_PREFIX}/analytics", tags=["Analytics"])
app.include_router(health_router, prefix=f"{API_V1_PREFIX}", tags=["Health"])


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{API_V1_PREFIX}/health",
        "api": API_V1_PREFIX,
    }


# Liveness check without dependencies
@app.get("/health", tags=["Health"])
async def simple_health_check():
    """Simple health check endpoint."""
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "service": settings.app_name,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chatbot_studio.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
