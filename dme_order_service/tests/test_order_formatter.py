import json
from datetime import date
from decimal import Decimal

import pytest

from dme_orders.schemas.models import (
    BiPapPrescription,
    CpapPrescription,
    OxygenPrescription,
    PhysicianNote,
    UsageContext,
    WheelchairPrescription,
)
from dme_orders.services.extraction import simple_extract_note
from dme_orders.services.order_formatter import (
    build_ahi_qualifier,
    build_order_payload,
    calculate_age,
    format_order_request,
    trim_decimal,
    usage_to_string,
)

TODAY = date(2025, 6, 1)
ADULT_DOB = date(1970, 1, 1)
CHILD_DOB = date(2015, 1, 1)


class TestAhiQualifier:
    @pytest.mark.parametrize(
        "ahi, expected",
        [
            (45, "AHI > 30 (severe, adult)"),
            (30, "AHI > 30 (severe, adult)"),
            (29, "AHI > 15 (moderate, adult)"),
            (15, "AHI > 15 (moderate, adult)"),
            (14, "AHI > 5 (mild, adult)"),
            (5, "AHI > 5 (mild, adult)"),
            (4, "AHI < 5 (normal, adult)"),
            (0, "AHI < 5 (normal, adult)"),
        ],
    )
    def test_adult_bands(self, ahi, expected):
        assert build_ahi_qualifier(ahi, ADULT_DOB, TODAY) == expected

    @pytest.mark.parametrize(
        "ahi, expected",
        [
            (12, "AHI > 10 (severe, pediatric)"),
            (10, "AHI > 10 (severe, pediatric)"),
            (9, "AHI > 5 (moderate, pediatric)"),
            (5, "AHI > 5 (moderate, pediatric)"),
            (4, "AHI > 1 (mild, pediatric)"),
            (1, "AHI > 1 (mild, pediatric)"),
            (0, "AHI < 1 (normal, pediatric)"),
        ],
    )
    def test_pediatric_bands(self, ahi, expected):
        assert build_ahi_qualifier(ahi, CHILD_DOB, TODAY) == expected

    def test_no_ahi(self):
        assert build_ahi_qualifier(None, ADULT_DOB, TODAY) is None

    def test_missing_dob_is_adult(self):
        assert build_ahi_qualifier(8, None, TODAY) == "AHI > 5 (mild, adult)"

    def test_exactly_eighteen_is_adult(self):
        assert build_ahi_qualifier(8, date(2007, 6, 1), TODAY) == "AHI > 5 (mild, adult)"

    def test_day_before_eighteenth_birthday_is_pediatric(self):
        assert build_ahi_qualifier(8, date(2007, 6, 2), TODAY) == "AHI > 5 (moderate, pediatric)"


def test_calculate_age():
    assert calculate_age(date(1952, 4, 12), date(2025, 4, 11)) == 72
    assert calculate_age(date(1952, 4, 12), date(2025, 4, 12)) == 73


@pytest.mark.parametrize(
    "value, expected",
    [(Decimal("2"), "2"), (Decimal("2.0"), "2"), (Decimal("2.50"), "2.5"), (Decimal("0.5"), "0.5"), (Decimal("10"), "10")],
)
def test_trim_decimal(value, expected):
    assert trim_decimal(value) == expected


def test_usage_to_string():
    assert usage_to_string(UsageContext.SLEEP | UsageContext.EXERTION) == "sleep and exertion"
    assert usage_to_string(UsageContext.SLEEP) == "sleep"
    assert usage_to_string(UsageContext.EXERTION) == "exertion"
    assert usage_to_string(UsageContext.NONE) is None


def test_harold_finch_payload(harold_finch_note):
    payload = format_order_request(simple_extract_note(harold_finch_note))
    assert payload == (
        '{"diagnosis":"COPD","ordering_provider":"Dr. Cuddy","patient_name":"Harold Finch",'
        '"device":"Oxygen Tank","liters":"2 L","usage":"sleep and exertion"}'
    )


def test_cpap_note_without_dob_is_adult(cpap_note):
    payload = json.loads(format_order_request(simple_extract_note(cpap_note)))
    assert payload["device"] == "CPAP"
    assert payload["mask_type"] == "full face"
    assert payload["add_ons"] == ["heated humidifier"]
    assert payload["qualifier"] == "AHI > 15 (moderate, adult)"
    assert "dob" not in payload


def test_key_order_and_dob_format():
    note = PhysicianNote(
        patient_name="Ann Lee",
        date_of_birth=date(1952, 4, 2),
        diagnosis="OSA",
        ordering_physician="Dr. Park",
        prescription=CpapPrescription(mask_type="nasal_pillow", ahi=3),
    )
    payload = build_order_payload(note, TODAY)
    assert list(payload) == ["diagnosis", "ordering_provider", "patient_name", "dob", "device", "mask_type", "qualifier"]
    assert payload["dob"] == "04/02/1952"
    assert payload["mask_type"] == "nasal pillow"


def test_bipap_payload():
    note = PhysicianNote(
        prescription=BiPapPrescription(ipap_cm_h2o=16, epap_cm_h2o=8, backup_rate_bpm=12, heated_humidifier=True, ahi=42)
    )
    payload = build_order_payload(note, TODAY)
    assert payload == {
        "device": "BiPAP",
        "add_ons": ["heated humidifier"],
        "qualifier": "AHI > 30 (severe, adult)",
        "ipap_cm_h2o": 16,
        "epap_cm_h2o": 8,
        "backup_rate": 12,
    }


def test_wheelchair_payload_omits_justification():
    note = PhysicianNote(
        prescription=WheelchairPrescription(
            chair_type="power", seat_width_in=18, leg_rests="swing-away", cushion="roho", justification="MS"
        )
    )
    assert format_order_request(note) == (
        '{"device":"Wheelchair","chair_type":"power","seat_width_in":18,"leg_rests":"swing-away","cushion":"roho"}'
    )


def test_oxygen_without_settings():
    note = PhysicianNote(prescription=OxygenPrescription())
    assert format_order_request(note) == '{"device":"Oxygen Tank"}'


def test_oxygen_fractional_liters():
    note = PhysicianNote(prescription=OxygenPrescription(flow_liters_per_minute=Decimal("2.50")))
    assert build_order_payload(note)["liters"] == "2.5 L"


def test_no_prescription_is_unknown_device():
    assert format_order_request(PhysicianNote()) == '{"device":"Unknown"}'
    assert format_order_request(PhysicianNote(patient_name="Ann")) == '{"patient_name":"Ann","device":"Unknown"}'


def test_non_ascii_is_kept():
    note = PhysicianNote(patient_name="José Núñez")
    assert '"patient_name":"José Núñez"' in format_order_request(note)
