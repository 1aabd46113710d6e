"""
Dispatch API.

Components:
- app.py: FastAPI application and store-error -> status code translation
- schemas.py: pydantic validation of create payloads
"""

from .app import create_app

__all__ = ["create_app"]
