import pytest

HAROLD_FINCH_NOTE = (
    "Patient Name: Harold Finch\n"
    "Diagnosis: COPD\n"
    "Prescription: Requires a portable oxygen tank delivering 2 L per minute.\n"
    "Usage: During sleep and exertion.\n"
    "Ordering Physician: Dr. Cuddy"
)

CPAP_NOTE = (
    "Patient Name: Lisa Turner\n"
    "Diagnosis: Severe sleep apnea\n"
    "Recommendation: CPAP therapy with full face mask and heated humidifier.\n"
    "AHI: 28\n"
    "Ordering Physician: Dr. Foreman"
)

BIPAP_NOTE = (
    "Patient Name: Marcus Reed\n"
    "DOB: 04/12/1952\n"
    "Diagnosis: Obesity hypoventilation syndrome\n"
    "Recommendation: Failed CPAP trial. Start BiPAP ST with IPAP 16 cm H2O, EPAP 8 cm H2O, backup rate 12.\n"
    "Nasal pillow mask with heated humidifier.\n"
    "Sleep study AHI > 42\n"
    "Ordering Physician: Dr. Wilson"
)


@pytest.fixture
def harold_finch_note() -> str:
    return HAROLD_FINCH_NOTE


@pytest.fixture
def cpap_note() -> str:
    return CPAP_NOTE


@pytest.fixture
def bipap_note() -> str:
    return BIPAP_NOTE
