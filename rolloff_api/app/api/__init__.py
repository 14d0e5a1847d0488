"""
HTTP layer of the Rolloff API.

``router.py`` exposes a top-level ``router`` that includes every
domain router found in ``endpoints``.
"""
