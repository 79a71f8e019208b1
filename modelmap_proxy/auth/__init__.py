"""Authentication helpers for the proxy."""

from .bearer import extract_bearer_token

__all__ = ["extract_bearer_token"]
