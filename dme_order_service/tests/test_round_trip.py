"""Formatting a note and mapping the legacy payload back keeps the device and its numbers."""
from decimal import Decimal

from dme_orders.schemas.models import (
    BiPapPrescription,
    CpapPrescription,
    OxygenPrescription,
    PhysicianNote,
    UsageContext,
    WheelchairPrescription,
)
from dme_orders.services.extraction import simple_extract_note
from dme_orders.services.llm.extraction_sanitize import map_prescription
from dme_orders.services.order_formatter import build_order_payload


def _round_trip(note: PhysicianNote):
    return map_prescription(build_order_payload(note))


def test_oxygen(harold_finch_note):
    rx = _round_trip(simple_extract_note(harold_finch_note))
    assert isinstance(rx, OxygenPrescription)
    assert rx.flow_liters_per_minute == Decimal("2")
    assert rx.usage == UsageContext.SLEEP | UsageContext.EXERTION


def test_fractional_oxygen():
    rx = _round_trip(PhysicianNote(prescription=OxygenPrescription(flow_liters_per_minute=Decimal("2.5"))))
    assert rx.flow_liters_per_minute == Decimal("2.5")


def test_cpap(cpap_note):
    rx = _round_trip(simple_extract_note(cpap_note))
    assert isinstance(rx, CpapPrescription)
    assert rx.mask_type == "full_face"
    assert rx.heated_humidifier is True


def test_bipap(bipap_note):
    original = simple_extract_note(bipap_note).prescription
    rx = _round_trip(simple_extract_note(bipap_note))
    assert isinstance(rx, BiPapPrescription)
    assert (rx.ipap_cm_h2o, rx.epap_cm_h2o, rx.backup_rate_bpm) == (
        original.ipap_cm_h2o,
        original.epap_cm_h2o,
        original.backup_rate_bpm,
    )
    assert rx.mask_type == original.mask_type


def test_wheelchair():
    original = WheelchairPrescription(chair_type="manual", seat_width_in=18, seat_depth_in=16, leg_rests="fixed", cushion="foam")
    rx = _round_trip(PhysicianNote(prescription=original))
    assert rx == original


def test_unknown_device():
    assert _round_trip(PhysicianNote()) is None
