"""Types for OpenAI-compatible chat completion requests.

Requests are ``total=False`` TypedDicts: a key that is absent stays absent,
and a key explicitly set to ``None`` is a present value. The filter relies on
that distinction and never fills missing keys with ``None``.
"""

from typing import Any
from typing_extensions import TypedDict


class ChatMessage(TypedDict, total=False):
    """A message in a chat conversation (OpenAI format).

    Attributes:
        role: Role of the message sender ("system", "user", "assistant", ...).
        content: Text content, or a list of content parts for multi-modal input.
        name: Optional name for the speaker.
    """
    role: str
    content: str | list[dict[str, Any]] | None
    name: str | None


class StreamOptions(TypedDict, total=False):
    """Options for streaming responses.

    Attributes:
        include_usage: Ask the upstream to send a final usage chunk.
    """
    include_usage: bool


class ChatRequest(TypedDict, total=False):
    """The subset of a chat completion request forwarded upstream.

    Attributes:
        model: Model name, resolved through the model map before forwarding.
        messages: Conversation history.
        max_tokens: Legacy completion token limit.
        max_completion_tokens: Completion token limit.
        stream: Whether the upstream should answer with an event stream.
        stream_options: Streaming options.
        top_p: Nucleus sampling parameter.
        stop: Stop sequence or list of stop sequences.
        temperature: Sampling temperature, clamped to [0, 2].
        n: Number of completions; always 1 on the way out.
    """
    model: str
    messages: list[ChatMessage]
    max_tokens: int | None
    max_completion_tokens: int | None
    stream: bool | None
    stream_options: StreamOptions | None
    top_p: float | None
    stop: str | list[str] | None
    temperature: float | None
    n: int


class ModelCard(TypedDict):
    """A single entry of the ``/v1/models`` listing."""
    id: str
    object: str
    created: int
    owned_by: str


class ModelList(TypedDict):
    """The ``/v1/models`` response body."""
    object: str
    data: list[ModelCard]
