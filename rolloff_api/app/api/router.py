"""
Top-level API router.

Aggregates the domain routers under a unified prefix.  ``main.py``
mounts this router at ``/api`` so containers live under
``/api/containers``.
"""

from fastapi import APIRouter

from .endpoints import containers

router = APIRouter()

router.include_router(containers.router, prefix="/containers", tags=["containers"])
