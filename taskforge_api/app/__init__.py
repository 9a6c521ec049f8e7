"""
Application package initializer.

The API is organised into ``core`` (configuration, logging, database,
caller identity), ``schemas`` (pydantic payloads), ``services``
(storage and business rules) and ``api`` (versioned routers).
"""

from .main import app  # noqa: F401
