"""API module for the proxy."""

from .routes import chat_completions, image_generations, list_models, service_info

__all__ = [
    "chat_completions",
    "image_generations",
    "list_models",
    "service_info",
]
