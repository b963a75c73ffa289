"""
Run the Todo API with uvicorn.

Usage:
    python -m todo_api
"""
from __future__ import annotations

import logging

import uvicorn
from sqlalchemy.engine import make_url

from .logs import configure_logging
from .main import create_app
from .settings import get_settings

logger = logging.getLogger("todo_api")


# PUBLIC_INTERFACE
def main() -> None:
    """Configure logging, build the app from the environment, and serve it."""
    settings = get_settings()
    configure_logging(settings.log_level)
    if settings.persistence_backend == "sql":
        masked = make_url(settings.database_url()).render_as_string(hide_password=True)
        logger.info("using database %s table %s", masked, settings.db_table)
    else:
        logger.info("using in-memory storage")

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
