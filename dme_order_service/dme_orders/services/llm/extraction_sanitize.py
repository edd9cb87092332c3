# dme_orders/services/llm/extraction_sanitize.py
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from dme_orders.schemas.models import (
    BiPapPrescription,
    CpapPrescription,
    MaskType,
    OxygenPrescription,
    PhysicianNote,
    Prescription,
    UsageContext,
    WheelchairPrescription,
)
from dme_orders.services.parsing.values import parse_date, parse_flow_rate

_MASK_TYPES: Dict[str, MaskType] = {
    "unknown": "unknown",
    "fullface": "full_face",
    "nasal": "nasal",
    "nasalpillow": "nasal_pillow",
}

_USAGE_FLAGS = {
    "none": UsageContext.NONE,
    "sleep": UsageContext.SLEEP,
    "exertion": UsageContext.EXERTION,
}

_CONNECTOR_RE = re.compile(r"\s*(?:and|&|/)\s*", re.I)
_TOKEN_NOISE_RE = re.compile(r"[\s_\-]+")
_INT_STR_RE = re.compile(r"[+-]?\d+", re.ASCII)


# --- typed getters: LLMs send numbers as numbers or as strings ---

def get_str(obj: Dict[str, Any], key: str) -> Optional[str]:
    v = obj.get(key)
    return v if isinstance(v, str) else None


def get_bool(obj: Dict[str, Any], key: str, default: bool = False) -> bool:
    v = obj.get(key)
    return v if isinstance(v, bool) else default


def get_int(obj: Dict[str, Any], key: str) -> Optional[int]:
    v = obj.get(key)
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str):
        # plain digits only; no "1_000" or other Python literal forms
        s = v.strip()
        return int(s) if _INT_STR_RE.fullmatch(s) else None
    return None


def get_decimal(obj: Dict[str, Any], key: str) -> Optional[Decimal]:
    v = obj.get(key)
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        d = Decimal(str(v))
        return d if d.is_finite() else None
    if isinstance(v, str):
        try:
            d = Decimal(v.strip())
        except InvalidOperation:
            # legacy payloads carry "2 L"
            return parse_flow_rate(v)
        return d if d.is_finite() else None
    return None


def get_date(obj: Dict[str, Any], key: str) -> Optional[date]:
    v = obj.get(key)
    return parse_date(v) if isinstance(v, str) else None


# --- enum normalization ---

def normalize_mask_type(raw: Optional[str]) -> MaskType:
    if not raw or not raw.strip():
        return "unknown"
    key = _TOKEN_NOISE_RE.sub("", raw.strip()).lower()
    return _MASK_TYPES.get(key, "unknown")


def normalize_usage(raw: Optional[str]) -> UsageContext:
    """
    'sleep and exertion', 'sleep/exertion', 'Sleep & Exertion' -> SLEEP | EXERTION.
    Any unknown token makes the whole value NONE.
    """
    if not raw or not raw.strip():
        return UsageContext.NONE

    s = _CONNECTOR_RE.sub(",", raw.strip())
    tokens = [_TOKEN_NOISE_RE.sub("", t).lower() for t in s.split(",")]
    tokens = [t for t in tokens if t]
    if not tokens:
        return UsageContext.NONE

    usage = UsageContext.NONE
    for t in tokens:
        flag = _USAGE_FLAGS.get(t)
        if flag is None:
            return UsageContext.NONE
        usage |= flag
    return usage


def _heated_humidifier(obj: Dict[str, Any]) -> bool:
    if get_bool(obj, "heated_humidifier"):
        return True
    add_ons = obj.get("add_ons")  # legacy order payload
    return isinstance(add_ons, list) and "heated humidifier" in add_ons


# --- device mapping ---

def map_prescription(obj: Dict[str, Any]) -> Optional[Prescription]:
    device = (get_str(obj, "device") or "").strip().lower()

    if device == "cpap":
        return CpapPrescription(
            mask_type=normalize_mask_type(get_str(obj, "mask_type")),
            heated_humidifier=_heated_humidifier(obj),
            ahi=get_int(obj, "ahi"),
        )
    if device == "bipap":
        return BiPapPrescription(
            ipap_cm_h2o=get_int(obj, "ipap_cm_h2o"),
            epap_cm_h2o=get_int(obj, "epap_cm_h2o"),
            backup_rate_bpm=get_int(obj, "backup_rate"),
            mask_type=normalize_mask_type(get_str(obj, "mask_type")),
            heated_humidifier=_heated_humidifier(obj),
            ahi=get_int(obj, "ahi"),
        )
    if device in ("oxygen tank", "oxygen"):
        return OxygenPrescription(
            flow_liters_per_minute=get_decimal(obj, "liters"),
            usage=normalize_usage(get_str(obj, "usage")),
        )
    if device == "wheelchair":
        return WheelchairPrescription(
            chair_type=get_str(obj, "chair_type"),
            seat_width_in=get_int(obj, "seat_width_in"),
            seat_depth_in=get_int(obj, "seat_depth_in"),
            leg_rests=get_str(obj, "leg_rests"),
            cushion=get_str(obj, "cushion"),
            justification=get_str(obj, "justification"),
        )
    return None


def sanitize_extracted_note(raw: Dict[str, Any]) -> PhysicianNote:
    prescription = raw.get("prescription")
    return PhysicianNote(
        patient_name=get_str(raw, "patient_name"),
        date_of_birth=get_date(raw, "dob"),
        diagnosis=get_str(raw, "diagnosis"),
        ordering_physician=get_str(raw, "ordering_physician"),
        prescription=map_prescription(prescription) if isinstance(prescription, dict) else None,
    )
