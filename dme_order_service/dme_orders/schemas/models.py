from datetime import date
from decimal import Decimal
from enum import IntFlag
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DeviceType = Literal["CPAP", "BiPAP", "Oxygen Tank", "Wheelchair"]
MaskType = Literal["unknown", "full_face", "nasal", "nasal_pillow"]


class UsageContext(IntFlag):
    NONE = 0
    SLEEP = 1
    EXERTION = 2


class OxygenPrescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    device: Literal["Oxygen Tank"] = "Oxygen Tank"
    flow_liters_per_minute: Optional[Decimal] = Field(default=None, ge=0)
    usage: UsageContext = UsageContext.NONE


class CpapPrescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    device: Literal["CPAP"] = "CPAP"
    mask_type: MaskType = "unknown"
    heated_humidifier: bool = False
    ahi: Optional[int] = Field(default=None, ge=0)


class BiPapPrescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    device: Literal["BiPAP"] = "BiPAP"
    ipap_cm_h2o: Optional[int] = None       # inspiratory pressure
    epap_cm_h2o: Optional[int] = None       # expiratory pressure
    backup_rate_bpm: Optional[int] = None   # ST/backup mode only
    mask_type: MaskType = "unknown"
    heated_humidifier: bool = False
    ahi: Optional[int] = Field(default=None, ge=0)


class WheelchairPrescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    device: Literal["Wheelchair"] = "Wheelchair"
    chair_type: Optional[str] = Field(default=None, description="manual, power or transport")
    seat_width_in: Optional[int] = None
    seat_depth_in: Optional[int] = None
    leg_rests: Optional[str] = Field(default=None, description="elevating, swing-away, fixed, articulating")
    cushion: Optional[str] = Field(default=None, description="gel, foam, air, roho")
    justification: Optional[str] = None


Prescription = Annotated[
    Union[OxygenPrescription, CpapPrescription, BiPapPrescription, WheelchairPrescription],
    Field(discriminator="device"),
]


class PhysicianNote(BaseModel):
    """Normalized DME order extracted from one physician note."""

    model_config = ConfigDict(frozen=True)

    patient_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    diagnosis: Optional[str] = None
    ordering_physician: Optional[str] = None
    prescription: Optional[Prescription] = None


# --- API payloads ---

class NoteRequest(BaseModel):
    text: str = Field(..., description="Raw note text, optionally wrapped as {\"data\": \"...\"}")
    use_llm: Optional[bool] = None  # None -> USE_LLM_EXTRACTION


class SubmitRequest(NoteRequest):
    endpoint: Optional[str] = None  # None -> ORDER_API_URL


class FormatResponse(BaseModel):
    note: PhysicianNote
    payload: str


class SubmitResponse(BaseModel):
    ok: bool
    endpoint: str
    payload: str
