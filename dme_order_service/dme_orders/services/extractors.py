from typing import Callable, Optional

from dme_orders.core.llm_config import USE_LLM_EXTRACTION
from dme_orders.schemas.models import PhysicianNote
from dme_orders.services.extraction import simple_extract_note
from dme_orders.services.llm.extraction import llm_extract_note

NoteExtractor = Callable[[str], PhysicianNote]


def get_note_extractor(use_llm: Optional[bool] = None) -> NoteExtractor:
    """Both strategies share one signature: raw note text -> PhysicianNote."""
    if use_llm is None:
        use_llm = USE_LLM_EXTRACTION
    return llm_extract_note if use_llm else simple_extract_note
