"""Core module initialization."""

from .exceptions import (
    STATUS_ERROR_TYPES,
    AuthError,
    NetworkError,
    ProxyError,
    UpstreamError,
    ValidationError,
    error_type_for_status,
)
from .images import extract_image_result, generate_image, validate_image_request
from .model_map import ModelMap
from .registry import ProxyState, get_state, set_state
from .relay import relay_buffered, relay_stream
from .request_filter import SUPPORTED_FIELDS, filter_chat_request, parse_json_object
from .upstream import UpstreamClient, UpstreamResponse, UpstreamStream

__all__ = [
    "AuthError",
    "ModelMap",
    "NetworkError",
    "ProxyError",
    "ProxyState",
    "STATUS_ERROR_TYPES",
    "SUPPORTED_FIELDS",
    "UpstreamClient",
    "UpstreamError",
    "UpstreamResponse",
    "UpstreamStream",
    "ValidationError",
    "error_type_for_status",
    "extract_image_result",
    "filter_chat_request",
    "generate_image",
    "get_state",
    "parse_json_object",
    "relay_buffered",
    "relay_stream",
    "set_state",
    "validate_image_request",
]
