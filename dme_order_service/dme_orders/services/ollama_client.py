import logging
from typing import Any, Dict, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from dme_orders.core.llm_config import (
    OLLAMA_BASE_URL,
    OLLAMA_MAX_ATTEMPTS,
    OLLAMA_TEMPERATURE,
    OLLAMA_TIMEOUT_S,
)

logger = logging.getLogger(__name__)

ERROR_BODY_LEN = 2000


class OllamaError(RuntimeError):
    pass


class OllamaRetryableError(OllamaError):
    """429 / 5xx from Ollama; retried before surfacing."""


def _truncate(s: str, max_len: int) -> str:
    if not s or len(s) <= max_len:
        return s
    return s[:max_len] + "…"


@retry(
    stop=stop_after_attempt(OLLAMA_MAX_ATTEMPTS),
    wait=wait_exponential(multiplier=0.25, min=0.25, max=2),
    retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout, OllamaRetryableError)),
    reraise=True,
)
def _post_chat(url: str, payload: Dict[str, Any], timeout_s: int) -> requests.Response:
    r = requests.post(url, json=payload, timeout=timeout_s)
    if r.status_code == 429 or r.status_code >= 500:
        logger.warning("Ollama returned %s, retrying: %s", r.status_code, _truncate(r.text, 500))
        raise OllamaRetryableError(f"Ollama {r.status_code}: {_truncate(r.text, ERROR_BODY_LEN)}")
    return r


def ollama_chat(
    model: str,
    system: str,
    user: str,
    schema: Optional[Dict[str, Any]] = None,
    temperature: Optional[float] = None,
    timeout_s: Optional[int] = None,
) -> str:
    """
    Calls Ollama /api/chat and returns the assistant message content as-is.
    JSON parsing is left to the caller; `format` asks Ollama for schema-shaped output.
    """
    if not system or not system.strip():
        raise ValueError("System prompt cannot be empty.")
    if not user or not user.strip():
        raise ValueError("User content cannot be empty.")

    url = f"{OLLAMA_BASE_URL}/chat"
    payload: Dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        "stream": False,
        "options": {"temperature": temperature if temperature is not None else OLLAMA_TEMPERATURE},
    }
    if schema is not None:
        payload["format"] = schema

    logger.debug("Ollama request model=%s bytes=%d", model, len(user))
    try:
        r = _post_chat(url, payload, timeout_s or OLLAMA_TIMEOUT_S)
    except requests.RequestException as e:
        logger.error("Ollama request failed: %s", e)
        raise OllamaError(f"Ollama request failed: {e}") from e

    if r.status_code >= 400:
        logger.warning("Ollama returned %s: %s", r.status_code, _truncate(r.text, 500))
        raise OllamaError(f"Ollama {r.status_code}: {_truncate(r.text, ERROR_BODY_LEN)}")

    try:
        data = r.json()
    except ValueError as e:
        raise OllamaError(f"Ollama returned a non-JSON body: {_truncate(r.text, ERROR_BODY_LEN)}") from e

    content = (data.get("message") or {}).get("content", "")
    if not content or not content.strip():
        raise OllamaError("Ollama returned empty content.")
    return content
