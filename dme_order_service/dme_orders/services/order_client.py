import json
import logging
from typing import Optional

import requests

from dme_orders.core.app_config import ORDER_TIMEOUT_S
from dme_orders.schemas.models import PhysicianNote
from dme_orders.services.order_formatter import format_order_request

logger = logging.getLogger(__name__)


def _log_debug_payload(payload: str) -> None:
    # PHI: payload bodies only ever go to DEBUG
    if not logger.isEnabledFor(logging.DEBUG):
        return
    try:
        pretty = json.dumps(json.loads(payload), indent=2)
    except ValueError:
        logger.debug("POST payload (raw): %s", payload)
        return
    logger.debug("POST payload:\n%s", pretty)


def submit_order(payload: str, endpoint: str, timeout_s: Optional[int] = None) -> bool:
    """POST a formatted order. True on 2xx; False on any failure status or transport error."""
    _log_debug_payload(payload)
    logger.info("POST %s payloadLength=%d", endpoint, len(payload))

    try:
        r = requests.post(
            endpoint,
            data=payload.encode("utf-8"),
            headers={"Content-Type": "application/json"},
            timeout=timeout_s or ORDER_TIMEOUT_S,
        )
    except requests.RequestException as e:
        logger.error("POST %s threw exception: %s", endpoint, e)
        return False

    if not 200 <= r.status_code < 300:
        logger.error("POST %s failed: %s %s", endpoint, r.status_code, r.text[:500])
        return False

    logger.info("POST %s OK: %s", endpoint, r.status_code)
    return True


def send_note(note: PhysicianNote, endpoint: str) -> bool:
    return submit_order(format_order_request(note), endpoint)
