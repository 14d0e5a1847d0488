"""
Top-level package for the Rolloff container API.

All functionality lives in submodules under ``app``; import
``rolloff_api.app.main:app`` to serve it.
"""

__all__ = []
