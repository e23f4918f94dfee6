"""HTTP server for the debate arena.

Exposes the core operations as a JSON REST API under ``/api/v1`` using
Starlette, served by uvicorn (``arena-server``).
"""
