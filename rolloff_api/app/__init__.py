"""
Application package initializer.

The project is organised into small layers: ``core`` (settings,
logging, database access, errors), ``schemas`` (pydantic payloads),
``services`` (registry rules and storage backends) and ``api`` (FastAPI
routers).  ``main`` assembles them into the ASGI application.
"""

from .main import app  # noqa: F401
