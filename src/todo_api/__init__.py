"""
FastAPI Todo API package.

The application factory lives in ``todo_api.main.create_app``; a module-level
``todo_api.main.app`` built from environment settings is provided for ASGI
servers (``uvicorn todo_api.main:app``).
"""

__version__ = "0.1.0"
