"""
Bot LLM: OpenAI chat completions.
One blocking call per step, single user message, no retries.
"""

import logging
from typing import Any

from openai import OpenAI, OpenAIError

from opendatabot.core.config import (
    LLM_API_TIMEOUT,
    OPENAI_API_KEY,
    OPENAI_LLM_MODEL,
    RESP_TEMPERATURE,
)
from opendatabot.core.errors import LLMRequestError, ServiceUnavailableError

logger = logging.getLogger(__name__)


def get_openai_client() -> OpenAI:
    """Build an OpenAI client from OPENAI_API_KEY."""
    if not OPENAI_API_KEY:
        raise ServiceUnavailableError("OPENAI_API_KEY must be set in .env")
    return OpenAI(api_key=OPENAI_API_KEY, timeout=LLM_API_TIMEOUT)


def chat_completion(
    client: Any,
    prompt: str,
    model: str = OPENAI_LLM_MODEL,
    temperature: float = RESP_TEMPERATURE,
) -> str:
    """
    Send `prompt` as a single user message and return the first choice's content.
    `client` is an OpenAI client (anything exposing chat.completions.create).
    """
    logger.info("[llm:openai] sending request to openai: %r", prompt)
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )
    except OpenAIError as e:
        raise LLMRequestError(f"CreateChatCompletion: {e}") from e
    if not response.choices:
        raise LLMRequestError("CreateChatCompletion: response has no choices")
    out = response.choices[0].message.content or ""
    logger.info("[llm:openai] Got reply: %s", out)
    return out
