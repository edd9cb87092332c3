# dme_orders/services/parsing/prescriptions.py
import logging
import re
from typing import Callable, NamedTuple, Optional

from dme_orders.schemas.models import (
    BiPapPrescription,
    CpapPrescription,
    DeviceType,
    OxygenPrescription,
    Prescription,
    UsageContext,
    WheelchairPrescription,
)
from dme_orders.services.parsing.fields import FieldTable, get_field
from dme_orders.services.parsing.values import (
    parse_ahi,
    parse_first_int,
    parse_flow_rate,
    parse_mask_type,
)

logger = logging.getLogger(__name__)


class PrescriptionParser(NamedTuple):
    device: DeviceType
    matches: Callable[[str], bool]
    parse: Callable[[FieldTable, str, str], Optional[Prescription]]


# --- Oxygen ---

def _matches_oxygen(hint: str) -> bool:
    return "oxygen" in hint


def _parse_oxygen(fields: FieldTable, full_text: str, hint: str) -> Optional[Prescription]:
    usage = UsageContext.NONE
    if "sleep" in hint:
        usage |= UsageContext.SLEEP
    if "exertion" in hint:
        usage |= UsageContext.EXERTION

    return OxygenPrescription(flow_liters_per_minute=parse_flow_rate(full_text), usage=usage)


# --- CPAP ---

def _matches_cpap(hint: str) -> bool:
    return "cpap" in hint


def _parse_cpap(fields: FieldTable, full_text: str, hint: str) -> Optional[Prescription]:
    return CpapPrescription(
        mask_type=parse_mask_type(hint),
        heated_humidifier="heated humidifier" in hint,
        ahi=parse_ahi(get_field(fields, "AHI"), full_text),
    )


# --- BiPAP ---

_IPAP_PATTERN = r"\bIPAP\s*[:=]?\s*(\d{1,2})\s*cm\s*H2O\b"
_EPAP_PATTERN = r"\bEPAP\s*[:=]?\s*(\d{1,2})\s*cm\s*H2O\b"
_BACKUP_RATE_PATTERN = r"\bbackup\s*rate\s*[:=]?\s*(\d{1,2})\b"


def _matches_bipap(hint: str) -> bool:
    return "bipap" in hint or "bi-pap" in hint or "bilevel" in hint


def _parse_bipap(fields: FieldTable, full_text: str, hint: str) -> Optional[Prescription]:
    return BiPapPrescription(
        ipap_cm_h2o=parse_first_int(full_text, _IPAP_PATTERN),
        epap_cm_h2o=parse_first_int(full_text, _EPAP_PATTERN),
        backup_rate_bpm=parse_first_int(full_text, _BACKUP_RATE_PATTERN),
        mask_type=parse_mask_type(hint),
        heated_humidifier="heated humidifier" in hint,
        ahi=parse_ahi(get_field(fields, "AHI"), full_text),
    )


# --- Wheelchair ---

_CHAIR_TYPE_RE = re.compile(r"\b(manual|power|transport)\s+(?:wheel\s*chair|chair|wheelchair)\b", re.I)
_SEAT_WIDTH_PATTERN = r"\bseat\s*width\s*[:=]?\s*(\d{1,2})\s*(?:\"|in(?:ches)?)?(?!\d)"
_SEAT_DEPTH_PATTERN = r"\bseat\s*depth\s*[:=]?\s*(\d{1,2})\s*(?:\"|in(?:ches)?)?(?!\d)"

# Anchored to the noun so "... leg rests and gel cushion" doesn't bleed across phrases.
_LEG_REST_PHRASES = (
    ("elevating", re.compile(r"\belevating\s+leg\s*rests?\b", re.I)),
    ("swing-away", re.compile(r"\bswing[- ]away\s+leg\s*rests?\b", re.I)),
    ("fixed", re.compile(r"\bfixed\s+leg\s*rests?\b", re.I)),
    ("articulating", re.compile(r"\barticulating\s+leg\s*rests?\b", re.I)),
)
_LEG_REST_KV_RE = re.compile(r"\bleg\s*rests?\s*[:=]\s*(elevating|swing[- ]away|fixed|articulating)\b", re.I)
_CUSHION_PHRASE_RE = re.compile(r"\b(gel|foam|air|roho)\s+cushion\b", re.I)
_CUSHION_KV_RE = re.compile(r"\bcushion\s*[:=]\s*(gel|foam|air|roho)\b", re.I)


def _infer_chair_type(text: str) -> Optional[str]:
    m = _CHAIR_TYPE_RE.search(text)
    return m.group(1).lower() if m else None


def _find_leg_rests(text: str) -> Optional[str]:
    for label, pattern in _LEG_REST_PHRASES:
        if pattern.search(text):
            return label

    m = _LEG_REST_KV_RE.search(text)
    if m:
        return m.group(1).lower().replace(" ", "-")
    return None


def _find_cushion(text: str) -> Optional[str]:
    m = _CUSHION_PHRASE_RE.search(text) or _CUSHION_KV_RE.search(text)
    return m.group(1).lower() if m else None


def _matches_wheelchair(hint: str) -> bool:
    return "wheelchair" in hint


def _parse_wheelchair(fields: FieldTable, full_text: str, hint: str) -> Optional[Prescription]:
    chair_type = get_field(fields, "WheelchairType", "Chair Type", "Type") or _infer_chair_type(full_text)

    return WheelchairPrescription(
        chair_type=chair_type,
        seat_width_in=parse_first_int(full_text, _SEAT_WIDTH_PATTERN),
        seat_depth_in=parse_first_int(full_text, _SEAT_DEPTH_PATTERN),
        leg_rests=_find_leg_rests(full_text),
        cushion=_find_cushion(full_text),
        # never inferred from free text
        justification=get_field(fields, "Justification", "Functional Need", "Reason"),
    )


# BiPAP before CPAP: BiPAP notes often mention CPAP too.
PRESCRIPTION_PARSERS = (
    PrescriptionParser("BiPAP", _matches_bipap, _parse_bipap),
    PrescriptionParser("Oxygen Tank", _matches_oxygen, _parse_oxygen),
    PrescriptionParser("CPAP", _matches_cpap, _parse_cpap),
    PrescriptionParser("Wheelchair", _matches_wheelchair, _parse_wheelchair),
)


def select_prescription(fields: FieldTable, full_text: str, hint: str) -> Optional[Prescription]:
    """First parser that matches the hint and yields a prescription wins."""
    for parser in PRESCRIPTION_PARSERS:
        if not parser.matches(hint):
            continue
        prescription = parser.parse(fields, full_text, hint)
        if prescription is not None:
            logger.debug("Prescription parsed by %s parser", parser.device)
            return prescription
    return None
