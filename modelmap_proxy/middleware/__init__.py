"""Middleware modules for the proxy."""

from .cors import PREFLIGHT_HEADERS, AllowAllCORSMiddleware

__all__ = [
    "AllowAllCORSMiddleware",
    "PREFLIGHT_HEADERS",
]
