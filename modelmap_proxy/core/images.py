"""Image generation emulated on top of a chat completion.

The upstream has no images endpoint. Instead the prompt is sent as a chat
completion to an image-capable model and the first ``https://`` URL in the
assistant's reply becomes the generated image.
"""

import logging
import re
import time
from typing import Any, Mapping, Optional

from ..types import ChatRequest, ImageData, ImageResponse
from .exceptions import UpstreamError, ValidationError
from .model_map import ModelMap
from .request_filter import filter_chat_request
from .upstream import UpstreamClient, extract_error_message

logger = logging.getLogger("modelmap-proxy")

IMAGE_MODEL = "dall-e-3"
IMAGE_SIZE = "1024x1024"
IMAGE_MAX_TOKENS = 1000
MIN_REVISED_PROMPT_LENGTH = 10

URL_PATTERN = re.compile(r"https://[^\s)]+")


def validate_image_request(payload: Mapping[str, Any]) -> tuple[str, str]:
    """Return ``(prompt, size)`` or raise ``ValidationError``."""
    size = payload.get("size", IMAGE_SIZE)
    if size != IMAGE_SIZE:
        raise ValidationError(
            f"Invalid size '{size}'. Only {IMAGE_SIZE} is supported.",
            param="size",
            code="invalid_size",
        )

    prompt = payload.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationError(
            "You must provide a non-empty prompt",
            param="prompt",
            code="invalid_prompt",
        )
    return prompt, size


def build_image_chat_request(prompt: str, model_map: ModelMap) -> ChatRequest:
    return filter_chat_request(
        {
            "model": IMAGE_MODEL,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": IMAGE_MAX_TOKENS,
        },
        model_map,
    )


def extract_image_result(content: str, prompt: str) -> Optional[ImageData]:
    """Pull the image URL and a revised prompt out of the assistant reply.

    Returns ``None`` when the reply holds no URL.
    """
    match = URL_PATTERN.search(content)
    if match is None:
        return None

    revised = URL_PATTERN.sub("", content).strip()
    if len(revised) < MIN_REVISED_PROMPT_LENGTH:
        revised = prompt
    return ImageData(revised_prompt=revised, url=match.group(0))


def _assistant_content(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    message = choice.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


async def generate_image(
    client: UpstreamClient,
    payload: Mapping[str, Any],
    token: str,
    model_map: ModelMap,
) -> ImageResponse:
    """Run the image emulation for one request.

    Raises:
        ValidationError: Unsupported size or missing prompt; no upstream call.
        UpstreamError: Non-2xx upstream status, or a reply without an image.
        NetworkError: The upstream could not be reached.
    """
    prompt, size = validate_image_request(payload)
    body = build_image_chat_request(prompt, model_map)
    logger.info(f"Generating image via chat model {body.get('model')}, size={size}")

    upstream = await client.send(body, token)
    if not upstream.is_success:
        message = extract_error_message(upstream.content) or "Upstream API error"
        logger.warning(
            f"Image generation upstream error {upstream.status_code}: {message}"
        )
        raise UpstreamError(message, upstream.status_code)

    try:
        reply = upstream.json()
    except ValueError as exc:
        logger.error(f"Image generation upstream returned invalid JSON: {exc}")
        raise UpstreamError("Invalid upstream response", 502) from exc

    content = _assistant_content(reply)
    if content is None:
        logger.error("Image generation upstream reply has no message content")
        raise UpstreamError("Invalid upstream response", 502)

    image = extract_image_result(content, prompt)
    if image is None:
        logger.error("Image generation upstream reply contains no image URL")
        raise UpstreamError("No image URL found in upstream response", 502)

    return ImageResponse(created=int(time.time()), data=[image])
