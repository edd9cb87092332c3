from dme_orders.services.parsing.fields import get_field, normalize_key, parse_fields


def test_normalize_key_drops_punctuation_and_case():
    assert normalize_key("A.H.I.") == "ahi"
    assert normalize_key("Patient Name") == "patientname"
    assert normalize_key("Date-Of-Birth") == "dateofbirth"


def test_parse_fields_handles_all_line_endings():
    fields = parse_fields("Name: Ann\r\nDx: COPD\rDoctor: Dr. Lee\nAHI: 12")
    assert fields == {"name": "Ann", "dx": "COPD", "doctor": "Dr. Lee", "ahi": "12"}


def test_parse_fields_splits_on_first_colon_only():
    fields = parse_fields("Note: follow up at 10:30")
    assert fields["note"] == "follow up at 10:30"


def test_parse_fields_skips_lines_without_label():
    fields = parse_fields("just free text\n: orphan value\n...: dots only\n\n   \nDx: OSA")
    assert fields == {"dx": "OSA"}


def test_first_duplicate_label_wins():
    fields = parse_fields("A.H.I.: 30\nAHI: 12\nahi: 5")
    assert fields == {"ahi": "30"}


def test_parse_fields_blank_input():
    assert parse_fields("") == {}
    assert parse_fields("   \n  ") == {}


def test_get_field_tries_candidates_in_order_and_skips_blank():
    fields = parse_fields("Patient Name:   \nName: Harold Finch\nPatientName: Someone Else")
    # "Patient Name" and "PatientName" normalize to the same key; the blank one came first
    assert get_field(fields, "PatientName", "Name") == "Harold Finch"


def test_get_field_missing():
    assert get_field({"dx": "COPD"}, "Diagnosis") is None
