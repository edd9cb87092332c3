# dme_orders/services/parsing/values.py
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from dateutil import parser as date_parser

from dme_orders.schemas.models import MaskType

DATE_FORMATS = (
    "%m/%d/%Y",  # 09/23/1984, 9/3/1984
    "%m-%d-%Y",  # 04-12-1952, 4-5-1952
    "%Y-%m-%d",  # 1984-09-23
    "%Y/%m/%d",  # 1984/9/23
)

# Tried in order; first hit wins.
_FLOW_RATE_RES = (
    re.compile(r"\b(\d+(?:\.\d+)?)\s*L\s*(?:/|per)\s*min\b", re.I),  # 2 L/min, 2 L per min
    re.compile(r"\b(\d+(?:\.\d+)?)\s*L\b", re.I),                    # 2 L (assumed per minute)
    re.compile(r"\b(\d+(?:\.\d+)?)\s*LPM\b", re.I),                  # 2.5 LPM
)

_FIRST_INT_RE = re.compile(r"\d+")
_AHI_TEXT_RE = re.compile(r"\bAHI\s*[:>]\s*(\d+)\b", re.I)


def parse_date(s: Optional[str]) -> Optional[date]:
    """
    Parse a date of birth. Exact numeric formats first, then a loose
    dateutil parse for things like 'September 23, 1984'. Never raises.
    """
    if not s or not s.strip():
        return None

    value = s.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    # a bare number is not a date
    if value.isdigit():
        return None

    # missing parts come from Jan 1 of this year, never from today's day
    default = datetime(date.today().year, 1, 1)
    try:
        return date_parser.parse(value, default=default).date()
    except (ValueError, OverflowError):
        return None


def parse_flow_rate(raw: Optional[str]) -> Optional[Decimal]:
    if not raw:
        return None

    for pattern in _FLOW_RATE_RES:
        m = pattern.search(raw)
        if m:
            try:
                return Decimal(m.group(1))
            except InvalidOperation:
                return None
    return None


def parse_ahi(ahi_field: Optional[str], raw: str) -> Optional[int]:
    """Explicit AHI field wins over a free-text 'AHI: 28' / 'AHI > 20' scan."""
    if ahi_field and ahi_field.strip():
        m = _FIRST_INT_RE.search(ahi_field)
        if m:
            return int(m.group(0))

    m = _AHI_TEXT_RE.search(raw or "")
    if m:
        return int(m.group(1))
    return None


def parse_mask_type(hint: Optional[str]) -> MaskType:
    if not hint or not hint.strip():
        return "unknown"

    h = hint.lower()
    if "full face" in h:
        return "full_face"
    # "nasal pillow" must be checked before plain "nasal"
    if "nasal pillow" in h:
        return "nasal_pillow"
    if "nasal" in h:
        return "nasal"
    return "unknown"


def match_group(raw: str, pattern: str) -> Optional[str]:
    m = re.search(pattern, raw, re.I)
    if m:
        return m.group(1).strip()
    return None


def parse_first_int(raw: str, pattern: str) -> Optional[int]:
    value = match_group(raw, pattern)
    if value and value.isdigit():
        return int(value)
    return None
