"""API routes for the proxy."""

from .chat import chat_completions
from .images import image_generations
from .info import service_info
from .models import list_models

__all__ = [
    "chat_completions",
    "image_generations",
    "list_models",
    "service_info",
]
