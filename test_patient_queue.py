"""
Doctor console tests: queue ordering, status lifecycle, prescriptions, dashboard
"""

from datetime import datetime, timedelta

import pytest

from errors import InvalidStatusTransition, RecordNotFoundError
from models import EntityType, Medication, PatientStatus, Priority
from patient_queue import DoctorConsole
from pharmacy_manager import PharmacyManager
from triage_engine import TriageScorer


@pytest.fixture
def console(store):
    return DoctorConsole(store, PharmacyManager(store))


@pytest.fixture
def admit(store, make_patient):
    scorer = TriageScorer()

    def _admit(**fields):
        patient, _ = scorer.apply(make_patient(**fields))
        return store.store(EntityType.PATIENTS, patient)

    return _admit


class TestQueue:

    def test_most_urgent_first_then_earliest(self, console, admit):
        start = datetime(2025, 1, 1, 9, 0)
        low = admit(name="Low", current_symptoms=["vaccination"], appointment_time=start)
        medium_late = admit(name="Med late", current_symptoms=["fever"], appointment_time=start + timedelta(minutes=20))
        critical = admit(name="Crit", current_symptoms=["chest pain"], appointment_time=start + timedelta(minutes=30))
        medium_early = admit(name="Med early", current_symptoms=["cough"], appointment_time=start + timedelta(minutes=5))

        order = [p.id for p in console.get_sorted_queue()]

        assert order == [critical.id, medium_early.id, medium_late.id, low.id]

    def test_completed_patients_leave_queue(self, console, admit):
        patient = admit()
        console.start_consultation(patient.id)
        console.complete_consultation(patient.id)
        assert console.get_sorted_queue() == []


class TestLifecycle:

    def test_forward_transitions(self, console, admit, store):
        patient = admit()
        assert console.start_consultation(patient.id).status == PatientStatus.IN_CONSULTATION
        assert console.complete_consultation(patient.id).status == PatientStatus.COMPLETED
        assert store.get(EntityType.PATIENTS, patient.id).status == PatientStatus.COMPLETED

    def test_cannot_skip_or_repeat(self, console, admit):
        patient = admit()
        with pytest.raises(InvalidStatusTransition):
            console.complete_consultation(patient.id)

        console.start_consultation(patient.id)
        with pytest.raises(InvalidStatusTransition):
            console.start_consultation(patient.id)

    def test_unknown_patient(self, console):
        with pytest.raises(RecordNotFoundError):
            console.start_consultation("nope")

    def test_offline_status_change_is_queued(self, console, admit, store, connectivity):
        patient = admit()
        connectivity.set_online(False)
        console.start_consultation(patient.id)

        pending = store.list_pending(EntityType.PATIENTS)
        assert [p.status for p in pending] == [PatientStatus.IN_CONSULTATION]

    def test_audit_log_records_transitions(self, console, admit):
        patient = admit()
        console.start_consultation(patient.id)
        log = console.export_audit_log()
        assert log[-1]["action"] == "STATUS_CHANGED"
        assert log[-1]["new_status"] == "In Consultation"


class TestPrescriptions:

    def test_issue_prescription(self, console, admit, store):
        patient = admit()
        medications = [Medication(name="Paracetamol 500mg", dosage="500mg", frequency="TID",
                                  duration="5 days", quantity=15)]

        prescription = console.issue_prescription(patient.id, "Viral fever", "Rest, fluids", medications)

        assert prescription.doctor_id == "dr-001"
        assert prescription.is_digital
        assert prescription.status.value == "Active"
        assert [p.id for p in store.list_all(EntityType.PRESCRIPTIONS)] == [prescription.id]
        assert console.pharmacy.prescription_history[-1].id == prescription.id

    def test_prescription_requires_known_patient(self, console):
        with pytest.raises(RecordNotFoundError):
            console.issue_prescription("ghost", "", "", [])


def test_dashboard_stats(console, admit):
    now = datetime.now()
    critical = admit(current_symptoms=["severe bleeding"], appointment_time=now)
    admit(current_symptoms=["fever"], appointment_time=now)
    console.start_consultation(critical.id)
    console.complete_consultation(critical.id)

    stats = console.dashboard_stats(today=now)

    assert stats["total_patients"] == 2
    assert stats["waiting"] == 1
    assert stats["critical"] == 1
    assert stats["completed_today"] == 1
    assert stats["by_priority"][Priority.MEDIUM.value] == 1
