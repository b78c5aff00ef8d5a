# main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from config import load_settings
from database import UserDb
from errors import ConfigurationError
from models import Settings
import users
import logging
import sys
import time
import uvicorn
from typing import Optional

logger = logging.getLogger("CosmosUsersAPI")

API_PREFIX = "/api/v1"
VERSION = "1.0.0"


def create_app(settings: Settings, user_db: Optional[UserDb] = None) -> FastAPI:
    """Wire the users routes to a UserDb built once from the settings"""
    app = FastAPI(
        title="Cosmos Users API",
        description="CRUD operations on User documents stored in Azure Cosmos DB",
        version=VERSION
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.user_db = user_db if user_db is not None else UserDb(settings)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            processing_time = time.time() - start_time
            logger.error(f"{request.method} {request.url.path} failed ({processing_time:.3f}s): {str(e)}")
            raise
        processing_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({processing_time:.3f}s)"
        )
        return response

    @app.get("/")
    async def root():
        """Health check endpoint"""
        return {
            "status": "online",
            "message": "Cosmos Users API",
            "version": VERSION,
            "database": settings.database_name,
            "collection": settings.collection_name
        }

    app.include_router(users.router, prefix=API_PREFIX)
    return app


def run(settings: Settings):
    app = create_app(settings)
    logger.info(f"Starting Cosmos Users API on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")


def main():
    try:
        settings = load_settings()
        run(settings)
    except ConfigurationError as e:
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
