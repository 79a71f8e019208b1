"""Models listing endpoint - OpenAI compatible."""

import logging
import time

from ...core.images import IMAGE_MODEL
from ...core.registry import get_state
from ...types import ModelCard, ModelList

logger = logging.getLogger("modelmap-proxy")

MODEL_OWNER = "proxy"


async def list_models() -> ModelList:
    """List available models in OpenAI API format.

    GET /v1/models

    Returns:
        Every caller-facing name from the model map plus the image model,
        without duplicates.
    """
    logger.info("Received models list request")

    state = get_state()
    created = int(time.time())
    model_ids = dict.fromkeys(state.model_map.names())
    model_ids.setdefault(IMAGE_MODEL)

    return ModelList(
        object="list",
        data=[
            ModelCard(id=model_id, object="model", created=created, owned_by=MODEL_OWNER)
            for model_id in model_ids
        ],
    )
