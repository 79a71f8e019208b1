"""Projection of inbound chat requests onto the fields the upstream accepts."""

import json
import logging
from typing import Any, Mapping

from ..types import ChatRequest
from .exceptions import ValidationError
from .model_map import ModelMap

logger = logging.getLogger("modelmap-proxy")

SUPPORTED_FIELDS = (
    "model",
    "messages",
    "max_tokens",
    "max_completion_tokens",
    "stream",
    "stream_options",
    "top_p",
    "stop",
    "temperature",
    "n",
)

MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json_object(body: bytes) -> dict[str, Any]:
    """Decode a request body that must be a JSON object.

    An empty body and the non-standard literals NaN and Infinity are rejected.
    """
    try:
        payload = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError) as exc:
        logger.error(f"Invalid JSON payload: {exc}")
        raise ValidationError("Invalid JSON payload", code="invalid_json") from exc

    if not isinstance(payload, dict):
        logger.error("Payload must be a JSON object")
        raise ValidationError(
            "Request body must be a JSON object", code="invalid_json_shape"
        )
    return payload


def clamp_temperature(value: Any) -> Any:
    """Clamp a numeric temperature into [0, 2]; other values pass through."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if value < MIN_TEMPERATURE:
        return MIN_TEMPERATURE
    if value > MAX_TEMPERATURE:
        return MAX_TEMPERATURE
    return value


def is_stream_request(payload: Mapping[str, Any]) -> bool:
    return payload.get("stream") is True


def filter_chat_request(payload: Mapping[str, Any], model_map: ModelMap) -> ChatRequest:
    """Build the upstream body from an inbound chat request.

    Only whitelisted keys present in ``payload`` are copied, so absent keys
    stay absent. ``model`` is resolved through ``model_map``, ``temperature``
    is clamped and ``n`` is always forced to 1.
    """
    filtered: dict[str, Any] = {}
    for field in SUPPORTED_FIELDS:
        if field in payload:
            filtered[field] = payload[field]

    model = filtered.get("model")
    if isinstance(model, str):
        filtered["model"] = model_map.resolve(model)

    if "temperature" in filtered:
        filtered["temperature"] = clamp_temperature(filtered["temperature"])

    filtered["n"] = 1

    if logger.isEnabledFor(logging.DEBUG):
        dropped = sorted(key for key in payload if key not in SUPPORTED_FIELDS)
        if dropped:
            logger.debug("Dropped unsupported request fields: %s", dropped)

    return ChatRequest(**filtered)
