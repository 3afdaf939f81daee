"""
CareSync: Pharmacy Inventory
Stock levels, derived status, prescription-driven demand prediction, alerts
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from errors import StockNotFoundError
from models import (
    EntityType, PharmacySnapshot, PharmacyStock, Prescription, StockStatus,
)
from offline_storage import LocalRecordStore

logger = logging.getLogger(__name__)

DEMAND_WINDOW_DAYS = 30
DEMAND_GROWTH_PERCENT = 120


def default_stock() -> List[PharmacyStock]:
    return [
        PharmacyStock(medication_id="1", name="Paracetamol 500mg", current_stock=150,
                      minimum_stock=50, demand_prediction=200, last_restocked=date(2024, 12, 1)),
        PharmacyStock(medication_id="2", name="Insulin (Rapid-acting)", current_stock=25,
                      minimum_stock=30, demand_prediction=45, last_restocked=date(2024, 12, 5)),
        PharmacyStock(medication_id="3", name="Antibiotics (Amoxicillin)", current_stock=80,
                      minimum_stock=40, demand_prediction=120, last_restocked=date(2024, 11, 28)),
    ]


class PharmacyManager:
    """
    Inventory view backed by the pharmacy snapshot in the local record store.
    Every mutation persists a fresh snapshot.
    """

    def __init__(self, store: Optional[LocalRecordStore] = None,
                 stock: Optional[List[PharmacyStock]] = None):
        self.store = store
        self.prescription_history: List[Prescription] = []

        if stock is not None:
            self.stock = list(stock)
        else:
            self.stock = self._load_snapshot() or default_stock()

    def _load_snapshot(self) -> List[PharmacyStock]:
        if self.store is None:
            return []
        snapshots = self.store.list_all(EntityType.PHARMACY)
        return list(snapshots[0].items) if snapshots else []

    def _persist(self) -> None:
        if self.store is not None:
            self.store.store(EntityType.PHARMACY, PharmacySnapshot(items=self.stock))

    # ============================================================================
    # QUERIES
    # ============================================================================

    def get_stock(self) -> List[PharmacyStock]:
        return list(self.stock)

    def find(self, medication_id: str) -> PharmacyStock:
        for item in self.stock:
            if item.medication_id == medication_id:
                return item
        raise StockNotFoundError(f"No stock line for medication {medication_id}")

    def critical_alerts(self) -> List[PharmacyStock]:
        return [
            item for item in self.stock
            if item.status in (StockStatus.LOW_STOCK, StockStatus.OUT_OF_STOCK)
        ]

    # ============================================================================
    # MUTATIONS
    # ============================================================================

    def update_stock(self, medication_id: str, new_quantity: int) -> PharmacyStock:
        """Set on-hand quantity, stamp today's restock date, re-derive status"""
        if new_quantity < 0:
            raise ValueError("Stock quantity cannot be negative")

        current = self.find(medication_id)
        updated = current.model_copy(update={
            "current_stock": new_quantity,
            "last_restocked": date.today(),
        })
        self.stock = [updated if item.medication_id == medication_id else item for item in self.stock]

        logger.info(f"💊 Stock {updated.name}: {new_quantity} ({updated.status.value})")
        self._persist()
        return updated

    def add_prescription_to_history(self, prescription: Prescription) -> None:
        self.prescription_history.append(prescription)

    def analyze_demand(self, now: Optional[datetime] = None) -> List[PharmacyStock]:
        """
        Predict next month's demand per medication from the quantity
        prescribed over the last 30 days, plus 20% growth.
        """
        now = now or datetime.now()
        cutoff = now - timedelta(days=DEMAND_WINDOW_DAYS)
        recent = [p for p in self.prescription_history if p.date_issued >= cutoff]

        analyzed = []
        for item in self.stock:
            prescribed = sum(
                medication.quantity
                for prescription in recent
                for medication in prescription.medications
                if medication.name == item.name
            )
            analyzed.append(item.model_copy(update={
                "demand_prediction": -(-prescribed * DEMAND_GROWTH_PERCENT // 100),
            }))

        self.stock = analyzed
        self._persist()
        return list(self.stock)
