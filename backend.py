"""
CareSync: FastAPI Backend
Owns the process-scoped services and exposes intake, doctor console,
pharmacy, reference data and sync endpoints
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import List, Optional
import logging

import config
from errors import (
    CareSyncError, InvalidStatusTransition, RecordNotFoundError, RecordValidationError,
    StockNotFoundError, StorageError, VoiceUnavailableError,
)
from events import Connectivity, EventBus, NotificationLevel
from models import (
    Appointment, EntityType, HospitalType, Medication, Patient, PatientStatus, SchemeCategory,
)
from offline_storage import JsonFileStorage, LocalRecordStore
from patient_queue import DoctorConsole
from pharmacy_manager import PharmacyManager
from reference_data import hospitals_by_type, schemes_by_category
from sync_backend import build_sync_backend
from sync_coordinator import SyncCoordinator
from triage_engine import TriageScorer
from voice_service import VoiceService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ============================================================================
# REQUEST MODELS
# ============================================================================

class PatientIntake(BaseModel):
    """Intake form submission"""
    name: str = Field(..., min_length=1)
    email: str = Field(default="")
    phone: str = Field(default="")
    age: int = Field(..., ge=0, le=150)
    symptoms: List[str] = Field(default_factory=list)
    medical_history: List[str] = Field(default_factory=list)
    language: str = Field(default="en", pattern="^(en|pa)$")
    speak: bool = Field(default=False, description="Read the triage summary aloud when supported")


class StatusUpdate(BaseModel):
    status: PatientStatus


class PrescriptionRequest(BaseModel):
    patient_id: str
    diagnosis: str = Field(default="")
    instructions: str = Field(default="")
    medications: List[Medication] = Field(default_factory=list)


class StockUpdate(BaseModel):
    quantity: int = Field(..., ge=0)


class ConnectivityUpdate(BaseModel):
    online: bool


# ============================================================================
# SERVICES
# ============================================================================

class Services:
    """Every stateful service, wired once per process"""

    def __init__(self, storage=None, sync_backend=None, online: bool = config.START_ONLINE,
                 voice: Optional[VoiceService] = None):
        self.bus = EventBus()
        self.connectivity = Connectivity(self.bus, online=online)
        self.store = LocalRecordStore(
            storage if storage is not None else JsonFileStorage(config.DATA_PATH),
            self.connectivity,
            self.bus,
        )
        self.scorer = TriageScorer()
        self.pharmacy = PharmacyManager(self.store)
        self.console = DoctorConsole(self.store, self.pharmacy)
        self.coordinator = SyncCoordinator(
            self.store,
            sync_backend if sync_backend is not None else build_sync_backend(),
            self.connectivity,
            self.bus,
        )
        self.voice = voice or VoiceService()


ERROR_STATUS = {
    RecordValidationError: 422,
    RecordNotFoundError: 404,
    StockNotFoundError: 404,
    InvalidStatusTransition: 409,
    VoiceUnavailableError: 409,
    StorageError: 507,
}


def create_app(services: Optional[Services] = None) -> FastAPI:
    services = services or Services()

    app = FastAPI(title="CareSync API", version="1.0.0")
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CareSyncError)
    async def caresync_error(request: Request, exc: CareSyncError):
        status_code = ERROR_STATUS.get(type(exc), 500)
        logger.error(f"❌ {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    # ============================================================================
    # INTAKE
    # ============================================================================

    @app.post("/patients")
    async def submit_patient(intake: PatientIntake):
        """Triage and store a new patient"""
        patient = Patient(
            name=intake.name,
            email=intake.email,
            phone=intake.phone,
            age=intake.age,
            current_symptoms=intake.symptoms,
            medical_history=intake.medical_history,
            is_online=services.connectivity.online,
        )
        patient, result = services.scorer.apply(patient)
        stored = services.store.store(EntityType.PATIENTS, patient)

        logger.info(f"📋 Triage: {stored.id[:8]}... - {result.priority.value} ({result.score})")
        summary = services.scorer.spoken_summary(result, intake.language)

        spoken = False
        if intake.speak and services.voice.can_speak:
            try:
                services.voice.speak(summary, intake.language)
                spoken = True
            except Exception as e:
                logger.error(f"❌ Voice summary failed: {e}")
                services.bus.notify("Voice unavailable", str(e), NotificationLevel.WARNING)

        return {
            "patient": stored,
            "triage": result,
            "spoken_summary": summary,
            "spoken": spoken,
        }

    @app.get("/patients")
    async def list_patients(email: Optional[str] = None):
        patients = services.store.list_all(EntityType.PATIENTS)
        if email:
            patients = [p for p in patients if p.email == email]
        return patients

    @app.patch("/patients/{patient_id}/status")
    async def update_status(patient_id: str, update: StatusUpdate):
        if update.status == PatientStatus.IN_CONSULTATION:
            return services.console.start_consultation(patient_id)
        if update.status == PatientStatus.COMPLETED:
            return services.console.complete_consultation(patient_id)
        raise HTTPException(status_code=409, detail="Patients cannot return to Waiting")

    # ============================================================================
    # DOCTOR CONSOLE
    # ============================================================================

    @app.get("/queue")
    async def get_queue():
        patients = services.console.get_sorted_queue()
        logger.info(f"📊 Queue: {len(patients)} patients")
        return patients

    @app.get("/dashboard")
    async def dashboard():
        return services.console.dashboard_stats()

    @app.post("/prescriptions")
    async def issue_prescription(request: PrescriptionRequest):
        return services.console.issue_prescription(
            request.patient_id, request.diagnosis, request.instructions, request.medications,
        )

    @app.get("/prescriptions")
    async def list_prescriptions(patient_id: Optional[str] = None):
        prescriptions = services.store.list_all(EntityType.PRESCRIPTIONS)
        if patient_id:
            prescriptions = [p for p in prescriptions if p.patient_id == patient_id]
        return prescriptions

    @app.post("/appointments")
    async def book_appointment(appointment: Appointment):
        services.store.get(EntityType.PATIENTS, appointment.patient_id)
        return services.store.store(EntityType.APPOINTMENTS, appointment)

    @app.get("/appointments")
    async def list_appointments(patient_id: Optional[str] = None):
        appointments = services.store.list_all(EntityType.APPOINTMENTS)
        if patient_id:
            appointments = [a for a in appointments if a.patient_id == patient_id]
        return appointments

    @app.get("/audit-log")
    async def audit_log():
        return services.console.export_audit_log()

    # ============================================================================
    # PHARMACY
    # ============================================================================

    @app.get("/pharmacy/stock")
    async def pharmacy_stock(analyze: bool = False):
        if analyze:
            return services.pharmacy.analyze_demand()
        return services.pharmacy.get_stock()

    @app.put("/pharmacy/stock/{medication_id}")
    async def update_stock(medication_id: str, update: StockUpdate):
        return services.pharmacy.update_stock(medication_id, update.quantity)

    @app.get("/pharmacy/alerts")
    async def pharmacy_alerts():
        return services.pharmacy.critical_alerts()

    # ============================================================================
    # REFERENCE DATA
    # ============================================================================

    @app.get("/schemes")
    async def schemes(category: Optional[SchemeCategory] = None):
        return schemes_by_category(category)

    @app.get("/hospitals")
    async def hospitals(type: Optional[HospitalType] = None):
        return hospitals_by_type(type)

    # ============================================================================
    # VOICE
    # ============================================================================

    @app.get("/voice")
    async def voice_capabilities():
        return {
            "speak": services.voice.can_speak,
            "listen": services.voice.can_listen,
        }

    # ============================================================================
    # OFFLINE / SYNC
    # ============================================================================

    @app.post("/connectivity")
    async def connectivity(update: ConnectivityUpdate):
        report = await services.coordinator.connectivity_changed(update.online)
        return {
            "status": services.coordinator.status(),
            "sync": report.model_dump(mode="json") if report else None,
        }

    @app.post("/sync")
    async def sync_now():
        report = await services.coordinator.sync_pending()
        return report.model_dump(mode="json")

    @app.get("/sync/status")
    async def sync_status():
        status = services.coordinator.status()
        status["storage"] = services.store.storage_usage()
        return status

    @app.delete("/local-data")
    async def clear_local_data():
        services.store.clear_all()
        return {"cleared": True}

    @app.get("/notifications")
    async def notifications(limit: int = 20):
        return services.bus.recent_notifications(limit)

    @app.get("/health")
    async def api_health():
        """API health"""
        return {"status": "healthy", "online": services.connectivity.online}

    logger.info("🚀 CareSync API ready")
    return app


app = create_app()

# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    logger.info("🚀 Starting on http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000, workers=1)
