"""
CareSync: Sync Coordinator
Drains pending queues when connectivity returns; one pass at a time
"""

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

import config
from events import Connectivity, EventBus, NotificationLevel, SyncCompleted, SyncFailed
from models import EntityType
from offline_storage import LocalRecordStore

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    IDLE = "Idle"
    SYNCING = "Syncing"


class SyncReport(BaseModel):
    """Outcome of one sync pass"""
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    skipped: bool = Field(default=False, description="Offline or another pass in progress")
    flushed: Dict[str, int] = Field(default_factory=dict)
    failed: Dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.skipped and not self.failed


class SyncCoordinator:
    """
    Two states, Idle and Syncing, for the lifetime of the process.

    Each entity type is flushed as its own sequence, in insertion order.
    A type's queue is drained only after every one of its records was
    acknowledged; any failure leaves that queue untouched for the next pass.
    """

    def __init__(self, store: LocalRecordStore, backend, connectivity: Connectivity, bus: EventBus,
                 flush_timeout: Optional[float] = config.SYNC_FLUSH_TIMEOUT):
        self.store = store
        self.backend = backend
        self.connectivity = connectivity
        self.bus = bus
        self.flush_timeout = flush_timeout
        self.state = SyncState.IDLE
        self.last_report: Optional[SyncReport] = None

    # ============================================================================
    # CONNECTIVITY
    # ============================================================================

    async def connectivity_changed(self, online: bool) -> Optional[SyncReport]:
        """Apply a connectivity event; regaining connectivity triggers a sync pass"""
        if not self.connectivity.set_online(online):
            return None

        if not online:
            self.bus.notify("Working offline", "Data will sync when connection is restored",
                            NotificationLevel.WARNING)
            return None

        self.bus.notify("Connection restored", "Data will be synchronized", NotificationLevel.SUCCESS)
        return await self.sync_pending()

    # ============================================================================
    # SYNC PASS
    # ============================================================================

    async def sync_pending(self) -> SyncReport:
        if not self.connectivity.online or self.state is SyncState.SYNCING:
            logger.info(f"⏭️ Sync skipped (online={self.connectivity.online}, state={self.state.value})")
            return SyncReport(skipped=True, finished_at=datetime.now())

        self.state = SyncState.SYNCING
        report = SyncReport()
        try:
            entity_types = [
                entity_type for entity_type in EntityType
                if self.store.list_pending(entity_type)
            ]
            await asyncio.gather(*(self._flush_type(t, report) for t in entity_types))
        finally:
            self.state = SyncState.IDLE
            report.finished_at = datetime.now()
            self.last_report = report

        if report.failed:
            self.bus.notify("Sync Failed", "Will retry when connection improves", NotificationLevel.ERROR)
        elif report.flushed:
            self.bus.notify("Sync Complete", "All data synchronized successfully", NotificationLevel.SUCCESS)
        return report

    async def _flush_type(self, entity_type: EntityType, report: SyncReport) -> None:
        pending = self.store.list_pending(entity_type)
        try:
            for record in pending:
                await self._submit(entity_type, record)
            self.store.drain_pending(entity_type, len(pending))
        except asyncio.TimeoutError:
            self._record_failure(entity_type, f"Timed out after {self.flush_timeout}s", report, len(pending))
            return
        except Exception as e:
            self._record_failure(entity_type, str(e), report, len(pending))
            return

        report.flushed[entity_type.value] = len(pending)
        logger.info(f"✅ Synced {len(pending)} {entity_type.value}")
        self.bus.publish(SyncCompleted(entity_type=entity_type.value, flushed=len(pending)))

    async def _submit(self, entity_type: EntityType, record) -> None:
        if self.flush_timeout:
            await asyncio.wait_for(self.backend.submit(entity_type, record), timeout=self.flush_timeout)
        else:
            await self.backend.submit(entity_type, record)

    def _record_failure(self, entity_type: EntityType, error: str, report: SyncReport, pending: int) -> None:
        logger.error(f"❌ Sync failed for {entity_type.value}: {error}")
        report.failed[entity_type.value] = error
        self.bus.publish(SyncFailed(entity_type=entity_type.value, error=error, pending=pending))

    # ============================================================================
    # STATUS
    # ============================================================================

    def status(self) -> Dict:
        return {
            "state": self.state.value,
            "online": self.connectivity.online,
            "pending": self.store.pending_counts(),
            "last_sync": self.last_report.model_dump(mode="json") if self.last_report else None,
        }
