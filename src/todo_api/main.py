from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .repositories import Repository, get_repository
from .routers import todos as todos_router
from .schemas import CODE_MALFORMED_INPUT
from .settings import Settings, get_settings
from .utils import respond

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and greeting endpoints."},
    {"name": "todos", "description": "CRUD operations for Todo items filtered by status."},
]


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The repository is injected when given; otherwise it is built from settings
    when the application starts. Startup creates the todo table if absent and
    shutdown releases the repository. A database that cannot be reached at
    startup aborts the process.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        repo = repository or get_repository(settings)
        try:
            repo.ensure_schema()
            app.state.repository = repo
            logger.info("todo store ready (backend=%s)", repo.name)
            yield
        finally:
            repo.close()

    app = FastAPI(
        title="Todo API",
        description="Minimal REST API for Todo records stored in a relational table.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Malformed JSON bodies and parameters that fail type coercion become a
        400 with business code 4000 instead of aborting the request.
        """
        logger.info("rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return respond(status.HTTP_400_BAD_REQUEST, CODE_MALFORMED_INPUT, "invalid request")

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check(request: Request):
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the active backend.
        """
        repo: Repository = request.app.state.repository
        return {"message": "Healthy", "backend": repo.name}

    app.include_router(todos_router.router)
    return app


app = create_app()
