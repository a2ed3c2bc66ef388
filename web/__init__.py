"""
Web application package for the chess rules and search core.

Provides a FastAPI-based REST API for playing two-player or human-vs-engine
games over HTTP. Run with any ASGI server, e.g. ``uvicorn web.app:app``.
"""
