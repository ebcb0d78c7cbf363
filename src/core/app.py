"""
Autoflow Builder - Core Application

This module provides the FastAPI application that serves workflow
generation, validation and template storage.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time

from .config import get_settings
from .database import init_db, close_db
from .exceptions import BaseAPIException

logger = logging.getLogger(__name__)


class AutoflowApp:
    """Application class wiring middleware, routes and lifecycle hooks."""

    def __init__(self):
        """Initialize the application."""
        self.settings = get_settings()
        self.app = None
        self._create_app()

    def _create_app(self):
        """Create the FastAPI application instance."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            """Application lifespan manager."""
            # Startup
            logger.info(f"Starting {self.settings.PROJECT_NAME} v{self.settings.VERSION}")

            await init_db()
            logger.info("Database initialized")

            # Warm the node catalog; a failed load leaves the fallback set in place
            from services.node_catalog import get_node_catalog

            catalog = get_node_catalog()
            await catalog.refresh()
            if catalog.degraded:
                logger.warning("Node catalog started in degraded mode with fallback node types")
            else:
                logger.info(f"Node catalog loaded with {len(await catalog.get_all())} node types")

            yield

            # Shutdown
            await close_db()
            logger.info("Database connections closed")

        self.app = FastAPI(
            title=self.settings.PROJECT_NAME,
            description="Generate, validate and score workflow automation documents from natural language",
            version=self.settings.VERSION,
            openapi_url=f"{self.settings.API_V1_STR}/openapi.json",
            docs_url=f"{self.settings.API_V1_STR}/docs",
            redoc_url=f"{self.settings.API_V1_STR}/redoc",
            lifespan=lifespan,
        )

        self._add_middleware()
        self._add_exception_handlers()
        self._add_routes()

    def _add_middleware(self):
        """Add middleware to the application."""
        cors_origins = list(self.settings.BACKEND_CORS_ORIGINS)
        frontend = self.settings.FRONTEND_URL.rstrip("/")
        if frontend and frontend not in cors_origins:
            cors_origins.append(frontend)

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Request timing header
        @self.app.middleware("http")
        async def add_process_time_header(request: Request, call_next):
            start_time = time.time()
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            return response

    def _add_exception_handlers(self):
        """Translate application exceptions into JSON responses."""

        @self.app.exception_handler(BaseAPIException)
        async def api_exception_handler(request: Request, exc: BaseAPIException):
            if exc.status_code >= 500:
                logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": exc.message, "details": exc.details},
            )

    def _add_routes(self):
        """Add routes to the application."""

        @self.app.get("/")
        async def root():
            return {
                "name": self.settings.PROJECT_NAME,
                "version": self.settings.VERSION,
                "docs": f"{self.settings.API_V1_STR}/docs",
            }

        from api.v1 import api_router
        self.app.include_router(api_router, prefix=self.settings.API_V1_STR)

    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self.app


def create_app() -> FastAPI:
    """Create and return the FastAPI application."""
    app_instance = AutoflowApp()
    return app_instance.get_app()
