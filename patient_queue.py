"""
CareSync: Doctor Console Queue
Priority-ordered patient queue, consultation lifecycle, digital prescriptions
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

import config
from errors import InvalidStatusTransition
from models import (
    EntityType, Medication, Patient, PatientStatus, Prescription, Priority,
)
from offline_storage import LocalRecordStore
from pharmacy_manager import PharmacyManager

logger = logging.getLogger(__name__)

PRIORITY_WEIGHT = {
    Priority.CRITICAL: 100,
    Priority.HIGH: 75,
    Priority.MEDIUM: 50,
    Priority.LOW: 25,
}

ALLOWED_TRANSITIONS = {
    PatientStatus.WAITING: PatientStatus.IN_CONSULTATION,
    PatientStatus.IN_CONSULTATION: PatientStatus.COMPLETED,
}


class DoctorConsole:
    """
    Doctor-facing view over stored patients:
    1. Clinical urgency first (Critical before Low)
    2. Within a tier, earliest appointment first
    3. Status only moves forward: Waiting -> In Consultation -> Completed
    4. Audit trail of every action
    """

    def __init__(self, store: LocalRecordStore, pharmacy: Optional[PharmacyManager] = None,
                 doctor_id: str = config.DOCTOR_ID):
        self.store = store
        self.pharmacy = pharmacy
        self.doctor_id = doctor_id
        self.audit_log: List[Dict] = []

    def get_sorted_queue(self) -> List[Patient]:
        """Patients not yet completed, most urgent first"""
        waiting = [
            p for p in self.store.list_all(EntityType.PATIENTS)
            if p.status != PatientStatus.COMPLETED
        ]
        return sorted(
            waiting,
            key=lambda p: (
                -PRIORITY_WEIGHT[p.priority],
                -p.triage_score,
                p.appointment_time,
            ),
        )

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    def start_consultation(self, patient_id: str) -> Patient:
        return self._advance(patient_id, PatientStatus.IN_CONSULTATION)

    def complete_consultation(self, patient_id: str) -> Patient:
        return self._advance(patient_id, PatientStatus.COMPLETED)

    def _advance(self, patient_id: str, target: PatientStatus) -> Patient:
        patient = self.store.get(EntityType.PATIENTS, patient_id)
        if ALLOWED_TRANSITIONS.get(patient.status) != target:
            raise InvalidStatusTransition(
                f"Patient {patient_id} cannot move from {patient.status.value} to {target.value}"
            )

        updated = self.store.update(EntityType.PATIENTS, patient.model_copy(update={"status": target}))
        self._log_action(
            action="STATUS_CHANGED",
            patient_id=patient_id,
            old_status=patient.status.value,
            new_status=target.value,
        )
        return updated

    # ============================================================================
    # PRESCRIPTIONS
    # ============================================================================

    def issue_prescription(self, patient_id: str, diagnosis: str, instructions: str,
                           medications: List[Medication]) -> Prescription:
        """Store a digital prescription for a known patient"""
        self.store.get(EntityType.PATIENTS, patient_id)

        prescription = Prescription(
            patient_id=patient_id,
            doctor_id=self.doctor_id,
            medications=medications,
            diagnosis=diagnosis,
            instructions=instructions,
        )
        stored = self.store.store(EntityType.PRESCRIPTIONS, prescription)
        if self.pharmacy is not None:
            self.pharmacy.add_prescription_to_history(stored)

        self._log_action(
            action="PRESCRIPTION_ISSUED",
            patient_id=patient_id,
            prescription_id=stored.id,
            medications=len(medications),
        )
        return stored

    # ============================================================================
    # DASHBOARD
    # ============================================================================

    def dashboard_stats(self, today: Optional[datetime] = None) -> Dict:
        today = (today or datetime.now()).date()
        patients = self.store.list_all(EntityType.PATIENTS)

        distribution = {level.value: 0 for level in Priority}
        for patient in patients:
            distribution[patient.priority.value] += 1

        return {
            "total_patients": len(patients),
            "waiting": sum(1 for p in patients if p.status == PatientStatus.WAITING),
            "in_consultation": sum(1 for p in patients if p.status == PatientStatus.IN_CONSULTATION),
            "critical": distribution[Priority.CRITICAL.value],
            "completed_today": sum(
                1 for p in patients
                if p.status == PatientStatus.COMPLETED and p.appointment_time.date() == today
            ),
            "by_priority": distribution,
        }

    def _log_action(self, action: str, **details) -> None:
        """Internal audit logging"""
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "action": action,
            **details
        }
        self.audit_log.append(log_entry)
        logger.info(f"📝 {action}: {details.get('patient_id', '')}")

    def export_audit_log(self) -> List[Dict]:
        return self.audit_log.copy()
