"""
Pharmacy tests: derived stock status, demand prediction, persistence
"""

from datetime import date, datetime, timedelta

import pytest

from errors import StockNotFoundError
from models import EntityType, Medication, PharmacyStock, Prescription, StockStatus
from pharmacy_manager import PharmacyManager


def stock_line(current, minimum=30, name="Insulin (Rapid-acting)"):
    return PharmacyStock(
        medication_id="2", name=name, current_stock=current,
        minimum_stock=minimum, last_restocked=date(2024, 12, 5),
    )


class TestStockStatus:

    @pytest.mark.parametrize("current,minimum,status", [
        (0, 30, StockStatus.OUT_OF_STOCK),
        (0, 0, StockStatus.OUT_OF_STOCK),
        (20, 30, StockStatus.LOW_STOCK),
        (30, 30, StockStatus.LOW_STOCK),
        (100, 30, StockStatus.IN_STOCK),
    ])
    def test_status_is_derived(self, current, minimum, status):
        assert stock_line(current, minimum).status == status

    def test_input_status_is_ignored(self):
        line = PharmacyStock.model_validate({
            "medication_id": "9", "name": "X", "current_stock": 0, "minimum_stock": 5,
            "last_restocked": "2024-12-01", "status": "In Stock",
        })
        assert line.status == StockStatus.OUT_OF_STOCK

    def test_update_stock_recomputes_status(self, store):
        pharmacy = PharmacyManager(store, stock=[stock_line(100)])

        for quantity, expected in [(0, StockStatus.OUT_OF_STOCK), (20, StockStatus.LOW_STOCK),
                                   (100, StockStatus.IN_STOCK)]:
            updated = pharmacy.update_stock("2", quantity)
            assert updated.status == expected
            assert pharmacy.find("2").status == expected
            assert updated.last_restocked == date.today()

    def test_update_stock_validation(self, store):
        pharmacy = PharmacyManager(store, stock=[stock_line(100)])
        with pytest.raises(ValueError):
            pharmacy.update_stock("2", -1)
        with pytest.raises(StockNotFoundError):
            pharmacy.update_stock("missing", 5)

    def test_critical_alerts(self, store):
        pharmacy = PharmacyManager(store)
        assert [item.name for item in pharmacy.critical_alerts()] == ["Insulin (Rapid-acting)"]


class TestPersistence:

    def test_snapshot_persists_and_reloads(self, store):
        PharmacyManager(store).update_stock("1", 7)

        reloaded = PharmacyManager(store)
        assert reloaded.find("1").current_stock == 7

    def test_offline_update_is_queued(self, store, connectivity):
        connectivity.set_online(False)
        PharmacyManager(store).update_stock("1", 7)
        assert len(store.list_pending(EntityType.PHARMACY)) == 1


class TestDemand:

    def test_demand_from_recent_prescriptions(self):
        pharmacy = PharmacyManager(stock=[stock_line(100, name="Paracetamol 500mg")])
        now = datetime(2025, 1, 31)
        for days_ago, quantity in [(1, 10), (10, 5), (45, 100)]:
            pharmacy.add_prescription_to_history(Prescription(
                patient_id="p", doctor_id="dr-001", date_issued=now - timedelta(days=days_ago),
                medications=[Medication(name="Paracetamol 500mg", quantity=quantity)],
            ))

        analyzed = pharmacy.analyze_demand(now=now)

        # 15 units in the window, +20%
        assert analyzed[0].demand_prediction == 18

    def test_demand_rounds_up(self):
        pharmacy = PharmacyManager(stock=[stock_line(100, name="Paracetamol 500mg")])
        pharmacy.add_prescription_to_history(Prescription(
            patient_id="p", doctor_id="dr-001",
            medications=[Medication(name="Paracetamol 500mg", quantity=1)],
        ))
        assert pharmacy.analyze_demand()[0].demand_prediction == 2
