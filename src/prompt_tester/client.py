import logging
import os
from typing import Any, Iterable

from huggingface_hub import InferenceClient

from .errors import MissingCredentialsError, ProviderError
from .schemas import Message

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


def require_api_key() -> str:
    api_key = os.getenv("OPENAI_API_KEY", "").strip()
    if not api_key:
        raise MissingCredentialsError("OPENAI_API_KEY environment variable not set")
    return api_key


def build_client() -> InferenceClient:
    """Create the single provider handle shared by every command in the process."""
    base_url = os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL)
    return InferenceClient(base_url=base_url, api_key=require_api_key())


def _extract_content(content: Any) -> str:
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts = [c.get("text", "") for c in content if isinstance(c, dict)]
        return "\n".join(p for p in parts if p).strip()
    return ""


def run_chat_inference(client: Any, model: str, messages: Iterable[Message], **params: Any) -> str:
    payload = [m.model_dump() for m in messages]
    logger.debug("chat completion: model=%s messages=%d params=%s", model, len(payload), sorted(params))

    try:
        resp = client.chat_completion(model=model, messages=payload, **params)
    except Exception as e:
        logger.debug("completion call failed: %s", e)
        raise ProviderError(f"{type(e).__name__}: {e}") from e

    if not resp.choices:
        raise ProviderError(f"provider returned no choices for model {model}")
    return _extract_content(resp.choices[0].message.content)
