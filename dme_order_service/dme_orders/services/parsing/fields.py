# dme_orders/services/parsing/fields.py
from typing import Dict, Optional

FieldTable = Dict[str, str]


def normalize_key(key: str) -> str:
    """'A.H.I.', 'AHI' and 'ahi' all normalize to 'ahi'."""
    return "".join(ch.lower() for ch in key if ch.isalnum())


def parse_fields(text: str) -> FieldTable:
    """
    Build a lookup table from "Label: value" lines.
    Lines without a colon (or with an empty label) are skipped; first label wins.
    """
    fields: FieldTable = {}
    if not text or not text.strip():
        return fields

    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue

        idx = line.find(":")
        if idx <= 0:
            continue

        key = normalize_key(line[:idx])
        if not key:
            continue
        fields.setdefault(key, line[idx + 1:].strip())

    return fields


def get_field(fields: FieldTable, *candidates: str) -> Optional[str]:
    for candidate in candidates:
        val = fields.get(normalize_key(candidate))
        if val and val.strip():
            return val.strip()
    return None
