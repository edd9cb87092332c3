# dme_orders/api/routes_notes.py
import logging

from fastapi import APIRouter, HTTPException

from dme_orders.core.app_config import ORDER_API_URL
from dme_orders.schemas.models import (
    FormatResponse,
    NoteRequest,
    PhysicianNote,
    SubmitRequest,
    SubmitResponse,
)
from dme_orders.services.extractors import get_note_extractor
from dme_orders.services.llm.extraction import NoteExtractionError
from dme_orders.services.ollama_client import OllamaError
from dme_orders.services.order_client import submit_order
from dme_orders.services.order_formatter import format_order_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def _extract(req: NoteRequest) -> PhysicianNote:
    extractor = get_note_extractor(req.use_llm)
    try:
        return extractor(req.text)
    except NoteExtractionError as e:
        logger.warning("LLM output rejected: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    except OllamaError as e:
        raise HTTPException(status_code=502, detail=f"LLM unavailable: {e}")


@router.post("/extract", response_model=PhysicianNote)
def extract_note(req: NoteRequest):
    return _extract(req)


@router.post("/format", response_model=FormatResponse)
def format_note(req: NoteRequest):
    note = _extract(req)
    return FormatResponse(note=note, payload=format_order_request(note))


@router.post("/submit", response_model=SubmitResponse)
def submit_note(req: SubmitRequest):
    endpoint = req.endpoint or ORDER_API_URL
    if not endpoint:
        raise HTTPException(status_code=500, detail="ORDER_API_URL is not configured.")

    note = _extract(req)
    payload = format_order_request(note)
    ok = submit_order(payload, endpoint)
    return SubmitResponse(ok=ok, endpoint=endpoint, payload=payload)
