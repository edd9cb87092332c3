import json
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from dme_orders.schemas.models import (
    BiPapPrescription,
    CpapPrescription,
    MaskType,
    OxygenPrescription,
    PhysicianNote,
    UsageContext,
    WheelchairPrescription,
)

ADULT_AGE = 18

_MASK_LABELS: Dict[MaskType, str] = {
    "full_face": "full face",
    "nasal": "nasal",
    "nasal_pillow": "nasal pillow",
}

# (lower bound, label), highest first
_ADULT_AHI_BANDS = ((30, "AHI > 30 (severe, adult)"), (15, "AHI > 15 (moderate, adult)"), (5, "AHI > 5 (mild, adult)"))
_PEDIATRIC_AHI_BANDS = ((10, "AHI > 10 (severe, pediatric)"), (5, "AHI > 5 (moderate, pediatric)"), (1, "AHI > 1 (mild, pediatric)"))


def calculate_age(dob: date, today: date) -> int:
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def build_ahi_qualifier(ahi: Optional[int], dob: Optional[date], today: Optional[date] = None) -> Optional[str]:
    """
    AASM severity bands, adult vs pediatric. Lower bounds are inclusive.
    Unknown DOB counts as adult.
    """
    if ahi is None:
        return None

    today = today or date.today()
    is_adult = dob is None or calculate_age(dob, today) >= ADULT_AGE

    if is_adult:
        bands, normal = _ADULT_AHI_BANDS, "AHI < 5 (normal, adult)"
    else:
        bands, normal = _PEDIATRIC_AHI_BANDS, "AHI < 1 (normal, pediatric)"

    for lower, label in bands:
        if ahi >= lower:
            return label
    return normal


def usage_to_string(usage: UsageContext) -> Optional[str]:
    if usage == UsageContext.SLEEP | UsageContext.EXERTION:
        return "sleep and exertion"
    if usage == UsageContext.SLEEP:
        return "sleep"
    if usage == UsageContext.EXERTION:
        return "exertion"
    return None


def trim_decimal(value: Decimal) -> str:
    """2 -> '2', 2.50 -> '2.5'."""
    if value % 1 == 0:
        return str(int(value))
    return format(value.normalize(), "f")


def _add_ons(heated_humidifier: bool) -> Optional[List[str]]:
    return ["heated humidifier"] if heated_humidifier else None


def _oxygen_fields(rx: OxygenPrescription) -> Dict[str, Any]:
    liters = rx.flow_liters_per_minute
    return {
        "device": "Oxygen Tank",
        "liters": f"{trim_decimal(liters)} L" if liters is not None else None,
        "usage": usage_to_string(rx.usage),
    }


def _cpap_fields(rx: CpapPrescription, dob: Optional[date], today: Optional[date]) -> Dict[str, Any]:
    return {
        "device": "CPAP",
        "mask_type": _MASK_LABELS.get(rx.mask_type),
        "add_ons": _add_ons(rx.heated_humidifier),
        "qualifier": build_ahi_qualifier(rx.ahi, dob, today),
    }


def _bipap_fields(rx: BiPapPrescription, dob: Optional[date], today: Optional[date]) -> Dict[str, Any]:
    return {
        "device": "BiPAP",
        "mask_type": _MASK_LABELS.get(rx.mask_type),
        "add_ons": _add_ons(rx.heated_humidifier),
        "qualifier": build_ahi_qualifier(rx.ahi, dob, today),
        "ipap_cm_h2o": rx.ipap_cm_h2o,
        "epap_cm_h2o": rx.epap_cm_h2o,
        "backup_rate": rx.backup_rate_bpm,
    }


def _wheelchair_fields(rx: WheelchairPrescription) -> Dict[str, Any]:
    # legacy payload has no slot for justification
    return {
        "device": "Wheelchair",
        "chair_type": rx.chair_type,
        "seat_width_in": rx.seat_width_in,
        "seat_depth_in": rx.seat_depth_in,
        "leg_rests": rx.leg_rests,
        "cushion": rx.cushion,
    }


def build_order_payload(note: PhysicianNote, today: Optional[date] = None) -> Dict[str, Any]:
    """Flat snake_case dict in the legacy order shape; None values are dropped."""
    dob = note.date_of_birth
    payload: Dict[str, Any] = {
        "diagnosis": note.diagnosis,
        "ordering_provider": note.ordering_physician,
        "patient_name": note.patient_name,
        "dob": dob.strftime("%m/%d/%Y") if dob else None,
    }

    rx = note.prescription
    if isinstance(rx, OxygenPrescription):
        payload.update(_oxygen_fields(rx))
    elif isinstance(rx, CpapPrescription):
        payload.update(_cpap_fields(rx, dob, today))
    elif isinstance(rx, BiPapPrescription):
        payload.update(_bipap_fields(rx, dob, today))
    elif isinstance(rx, WheelchairPrescription):
        payload.update(_wheelchair_fields(rx))
    else:
        payload["device"] = "Unknown"

    return {k: v for k, v in payload.items() if v is not None}


def format_order_request(note: PhysicianNote, today: Optional[date] = None) -> str:
    """
    Legacy JSON, e.g.
    {"diagnosis":"COPD","ordering_provider":"Dr. Cuddy","patient_name":"Harold Finch",
     "dob":"04/12/1952","device":"Oxygen Tank","liters":"2 L","usage":"sleep and exertion"}
    """
    return json.dumps(build_order_payload(note, today), separators=(",", ":"), ensure_ascii=False)
