import json
import logging

from dme_orders.schemas.models import PhysicianNote
from dme_orders.services.parsing.fields import get_field, parse_fields
from dme_orders.services.parsing.prescriptions import select_prescription
from dme_orders.services.parsing.values import parse_date

logger = logging.getLogger(__name__)

NAME_KEYS = ("PatientName", "Patient Name", "Name")
DOB_KEYS = ("dob", "DateOfBirth", "Date Of Birth")
DIAGNOSIS_KEYS = ("Diagnosis", "Dx")
PHYSICIAN_KEYS = ("OrderingPhysician", "Ordering Physician", "Physician", "Doctor", "Provider")
HINT_KEYS = ("Recommendation", "Prescription", "Device")


def unwrap_data_if_json(raw: str) -> str:
    """
    Notes may arrive as {"data": "<note text>"}.
    Anything that isn't that exact shape is returned untouched.
    """
    s = raw.strip()
    if len(s) > 1 and s[0] == "{":
        try:
            doc = json.loads(s)
        except (ValueError, RecursionError):
            logger.debug("Note looks like JSON but does not parse; using raw text")
            return raw
        if isinstance(doc, dict) and isinstance(doc.get("data"), str):
            return doc["data"]
    return raw


def simple_extract_note(text: str) -> PhysicianNote:
    """
    Regex/key-value extraction without an LLM.
    Header fields come from "Label: value" lines, the device from the
    first prescription parser whose keywords appear in the note.
    """
    if not text or not text.strip():
        return PhysicianNote()

    body = unwrap_data_if_json(text)
    fields = parse_fields(body)

    rec_or_rx = get_field(fields, *HINT_KEYS) or ""
    hint = f"{rec_or_rx} {body}".lower()

    return PhysicianNote(
        patient_name=get_field(fields, *NAME_KEYS),
        date_of_birth=parse_date(get_field(fields, *DOB_KEYS)),
        diagnosis=get_field(fields, *DIAGNOSIS_KEYS),
        ordering_physician=get_field(fields, *PHYSICIAN_KEYS),
        prescription=select_prescription(fields, body, hint),
    )
