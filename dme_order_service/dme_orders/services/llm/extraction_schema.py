# dme_orders/services/llm/extraction_schema.py

NOTE_SCHEMA = {
    "type": "object",
    "properties": {
        "patient_name": {"type": ["string", "null"]},
        "dob": {"type": ["string", "null"], "description": "MM/dd/yyyy"},
        "diagnosis": {"type": ["string", "null"]},
        "ordering_physician": {"type": ["string", "null"]},
        "prescription": {
            "type": "object",
            "properties": {
                "device": {
                    "type": ["string", "null"],
                    "enum": ["CPAP", "BiPAP", "Oxygen Tank", "Wheelchair", None],
                },
                # CPAP / BiPAP
                "mask_type": {"type": ["string", "null"], "enum": ["full face", "nasal", "nasal pillow", None]},
                "heated_humidifier": {"type": "boolean"},
                "ahi": {"type": ["integer", "null"]},
                "ipap_cm_h2o": {"type": ["integer", "null"]},
                "epap_cm_h2o": {"type": ["integer", "null"]},
                "backup_rate": {"type": ["integer", "null"]},
                # Oxygen
                "liters": {"type": ["number", "null"]},
                "usage": {"type": ["string", "null"], "description": "sleep | exertion | sleep and exertion"},
                # Wheelchair
                "chair_type": {"type": ["string", "null"], "enum": ["manual", "power", "transport", None]},
                "seat_width_in": {"type": ["integer", "null"]},
                "seat_depth_in": {"type": ["integer", "null"]},
                "leg_rests": {"type": ["string", "null"]},
                "cushion": {"type": ["string", "null"]},
                "justification": {"type": ["string", "null"]},
            },
            "required": ["device"],
        },
    },
    "required": ["patient_name", "dob", "diagnosis", "ordering_physician", "prescription"],
}
