"""
Main FastAPI Application
Entry point for the backend server
"""
import os
import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from motor.motor_asyncio import AsyncIOMotorClient

from leave_portal.config import settings
from leave_portal.database import init_db, ensure_default_admin
from leave_portal.logging_config import setup_logging
from leave_portal.api.errors import register_exception_handlers

# Import routers
from leave_portal.api.routes import auth, leaves, dashboard, compose, notifications

logger = logging.getLogger("leave_portal.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting %s %s", settings.APP_NAME, settings.APP_VERSION)

    # Initialize MongoDB
    client = AsyncIOMotorClient(settings.MONGODB_URL)
    await init_db(client[settings.MONGODB_DB_NAME])
    logger.info("Connected to MongoDB: %s", settings.MONGODB_DB_NAME)

    # Auto-create first admin if DB is empty
    await ensure_default_admin()

    yield

    logger.info("Shutting down")
    client.close()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Leave requests with sequential multi-approver workflow",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(leaves.router, prefix="/api/leaves", tags=["Leaves"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(compose.router, prefix="/api/compose", tags=["Smart Compose"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])

# Mount uploaded attachments
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Leave Portal API",
        "version": settings.APP_VERSION,
        "docs": "/api/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
