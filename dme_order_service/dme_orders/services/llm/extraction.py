# dme_orders/services/llm/extraction.py
import json
import logging
from typing import Callable, Optional

from pydantic import ValidationError

from dme_orders.core.llm_config import OLLAMA_MODEL_EXTRACT
from dme_orders.schemas.models import PhysicianNote
from dme_orders.services.llm.extraction_prompt import EXTRACT_SYSTEM_PROMPT
from dme_orders.services.llm.extraction_sanitize import sanitize_extracted_note
from dme_orders.services.llm.extraction_schema import NOTE_SCHEMA
from dme_orders.services.ollama_client import ollama_chat

logger = logging.getLogger(__name__)

SNIPPET_LEN = 200

# (system_prompt, user_text) -> raw model output
CompletionFn = Callable[[str, str], str]


class NoteExtractionError(ValueError):
    pass


def strip_code_fences(s: str) -> str:
    """Drop ```json ... ``` wrappers some models add around JSON."""
    if not s or not s.strip():
        return s

    s = s.strip()
    if s.startswith("```"):
        first_newline = s.find("\n")
        last_fence = s.rfind("```")
        if first_newline >= 0 and last_fence > first_newline:
            s = s[first_newline:last_fence].strip()
    return s


def _extraction_error(payload: str, reason: str) -> NoteExtractionError:
    snippet = (payload or "")[:SNIPPET_LEN]
    return NoteExtractionError(f"Failed to parse LLM JSON ({reason}). Payload snippet: {snippet}")


def parse_llm_note(payload: str) -> PhysicianNote:
    """Map the model's JSON answer onto a PhysicianNote; raises NoteExtractionError."""
    clean = strip_code_fences(payload or "")
    try:
        doc = json.loads(clean)
    except (ValueError, RecursionError) as e:
        raise _extraction_error(payload, "invalid JSON") from e

    if not isinstance(doc, dict):
        raise _extraction_error(payload, "expected a JSON object")
    if "prescription" not in doc:
        raise _extraction_error(payload, "missing 'prescription'")
    if doc["prescription"] is not None and not isinstance(doc["prescription"], dict):
        raise _extraction_error(payload, "'prescription' must be an object")

    try:
        return sanitize_extracted_note(doc)
    except ValidationError as e:
        raise _extraction_error(payload, "schema violation") from e


def ollama_complete(system: str, user: str) -> str:
    return ollama_chat(model=OLLAMA_MODEL_EXTRACT, system=system, user=user, schema=NOTE_SCHEMA)


def llm_extract_note(text: str, complete: Optional[CompletionFn] = None) -> PhysicianNote:
    if not text or not text.strip():
        return PhysicianNote()

    complete = complete or ollama_complete
    raw = complete(EXTRACT_SYSTEM_PROMPT, text)
    logger.debug("LLM returned %d chars", len(raw or ""))
    return parse_llm_note(raw)
