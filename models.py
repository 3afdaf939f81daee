"""
CareSync: Core Data Models
Pydantic models for patients, prescriptions, appointments, pharmacy stock,
reference data and triage results
"""

from pydantic import BaseModel, Field, computed_field, field_validator
from typing import Optional, List, Dict, Type
from enum import Enum
from datetime import datetime, date
from uuid import uuid4


def _new_id() -> str:
    return str(uuid4())


# ============================================================================
# ENUMS
# ============================================================================

class Priority(str, Enum):
    """Triage priority tier"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class PatientStatus(str, Enum):
    """Patient lifecycle: Waiting -> In Consultation -> Completed"""
    WAITING = "Waiting"
    IN_CONSULTATION = "In Consultation"
    COMPLETED = "Completed"


class PrescriptionStatus(str, Enum):
    ACTIVE = "Active"
    FILLED = "Filled"
    EXPIRED = "Expired"


class AppointmentStatus(str, Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class StockStatus(str, Enum):
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"


class SchemeCategory(str, Enum):
    MATERNAL = "maternal"
    CHILD = "child"
    GENERAL = "general"
    INSURANCE = "insurance"
    PREVENTIVE = "preventive"


class HospitalType(str, Enum):
    CH = "CH"
    PHC = "PHC"
    CHC = "CHC"


class EntityType(str, Enum):
    """Persisted entity kinds; each has a full list and a pending queue"""
    PATIENTS = "patients"
    PRESCRIPTIONS = "prescriptions"
    APPOINTMENTS = "appointments"
    PHARMACY = "pharmacy"


# ============================================================================
# SYNC METADATA
# ============================================================================

class SyncableRecord(BaseModel):
    """Fields stamped by the local record store on every write"""
    stored_at: Optional[datetime] = Field(None, description="When the record was persisted locally")
    pending_sync: bool = Field(default=False, description="Written while offline and not yet flushed")


# ============================================================================
# PATIENT
# ============================================================================

class Patient(SyncableRecord):
    """Patient captured at intake, with attached triage results"""
    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1)
    email: str = Field(default="")
    phone: str = Field(default="")
    age: int = Field(..., ge=0, le=150, description="Patient age in years")
    current_symptoms: List[str] = Field(default_factory=list)
    medical_history: List[str] = Field(default_factory=list)
    triage_score: int = Field(default=0, ge=0, le=10)
    priority: Priority = Field(default=Priority.LOW)
    appointment_time: datetime = Field(default_factory=datetime.now)
    status: PatientStatus = Field(default=PatientStatus.WAITING)
    is_online: bool = Field(default=True, description="Connectivity at creation time")

    @field_validator("current_symptoms", "medical_history", mode="before")
    @classmethod
    def split_labels(cls, v):
        """Accept comma-separated text; trim labels and drop blanks"""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [str(item).strip() for item in v if str(item).strip()]

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Patient name is required")
        return v


# ============================================================================
# PRESCRIPTION
# ============================================================================

class Medication(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1)
    dosage: str = Field(default="")
    frequency: str = Field(default="")
    duration: str = Field(default="")
    quantity: int = Field(default=0, ge=0)


class Prescription(SyncableRecord):
    """Digital prescription issued at the end of a consultation"""
    id: str = Field(default_factory=_new_id)
    patient_id: str
    doctor_id: str
    medications: List[Medication] = Field(default_factory=list)
    diagnosis: str = Field(default="")
    instructions: str = Field(default="")
    date_issued: datetime = Field(default_factory=datetime.now)
    is_digital: bool = Field(default=True)
    status: PrescriptionStatus = Field(default=PrescriptionStatus.ACTIVE)


# ============================================================================
# APPOINTMENT
# ============================================================================

class Appointment(SyncableRecord):
    id: str = Field(default_factory=_new_id)
    patient_id: str
    scheduled_for: datetime
    hospital_id: Optional[str] = None
    notes: str = Field(default="")
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED)


# ============================================================================
# PHARMACY
# ============================================================================

def derive_stock_status(current_stock: int, minimum_stock: int) -> StockStatus:
    if current_stock == 0:
        return StockStatus.OUT_OF_STOCK
    if current_stock <= minimum_stock:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class PharmacyStock(BaseModel):
    """Stock line; status is always derived, never taken from input"""
    medication_id: str
    name: str
    current_stock: int = Field(..., ge=0)
    minimum_stock: int = Field(..., ge=0)
    demand_prediction: int = Field(default=0, ge=0)
    last_restocked: date

    @computed_field
    @property
    def status(self) -> StockStatus:
        return derive_stock_status(self.current_stock, self.minimum_stock)


class PharmacySnapshot(SyncableRecord):
    """Whole-inventory snapshot persisted as a single object"""
    id: str = Field(default="pharmacy")
    items: List[PharmacyStock] = Field(default_factory=list)


# ============================================================================
# REFERENCE DATA
# ============================================================================

class HealthScheme(BaseModel):
    """Government health scheme (English / Punjabi)"""
    id: str
    name: str
    name_pa: str
    description: str
    description_pa: str
    eligibility: str
    eligibility_pa: str
    benefits: str
    benefits_pa: str
    category: SchemeCategory

    model_config = {"frozen": True}


class Hospital(BaseModel):
    id: str
    name: str
    phone: str
    email: str
    type: HospitalType
    location: str

    model_config = {"frozen": True}


# ============================================================================
# TRIAGE RESULT
# ============================================================================

class TriageResult(BaseModel):
    """Output of the rule-based triage scorer"""
    score: int = Field(..., ge=0, le=10)
    priority: Priority
    recommended_action: str
    estimated_wait_time: int = Field(..., ge=0, description="Minutes")
    recommended_schemes: List[HealthScheme] = Field(default_factory=list)


# ============================================================================
# ENTITY REGISTRY
# ============================================================================

ENTITY_MODELS: Dict[EntityType, Type[SyncableRecord]] = {
    EntityType.PATIENTS: Patient,
    EntityType.PRESCRIPTIONS: Prescription,
    EntityType.APPOINTMENTS: Appointment,
    EntityType.PHARMACY: PharmacySnapshot,
}
