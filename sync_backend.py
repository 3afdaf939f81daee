"""
CareSync: Backend Sync Collaborators
One remote submission per pending record
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

import requests

import config
from errors import SyncError
from models import EntityType, SyncableRecord

logger = logging.getLogger(__name__)


class SimulatedSyncBackend:
    """
    Stand-in for the hospital API: waits a fixed latency and acknowledges.
    Record ids listed in `fail_ids` (or a whole type in `fail_types`) are rejected.
    """

    def __init__(self, latency: float = config.SYNC_LATENCY_SECONDS):
        self.latency = latency
        self.fail_ids: Set[str] = set()
        self.fail_types: Set[EntityType] = set()
        self.submitted: List[Tuple[EntityType, str]] = []

    async def submit(self, entity_type: EntityType, record: SyncableRecord) -> None:
        record_id = getattr(record, "id", "")
        logger.info(f"🔄 Syncing {entity_type.value} {record_id}")
        await asyncio.sleep(self.latency)

        if entity_type in self.fail_types or record_id in self.fail_ids:
            raise SyncError(f"Backend rejected {entity_type.value} {record_id}")
        self.submitted.append((entity_type, record_id))


class HttpSyncBackend:
    """POSTs each record to {base_url}/{entity_type}"""

    def __init__(self, base_url: str, timeout: float = config.REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, entity_type: EntityType, payload: Dict[str, Any]) -> None:
        url = f"{self.base_url}/{entity_type.value}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SyncError(f"Cannot reach sync API at {url}: {e}") from e

        if response.status_code >= 400:
            raise SyncError(f"Sync API error {response.status_code} for {entity_type.value}")

    async def submit(self, entity_type: EntityType, record: SyncableRecord) -> None:
        payload = record.model_dump(mode="json")
        await asyncio.to_thread(self._post, entity_type, payload)


def build_sync_backend():
    """HTTP backend when SYNC_API_URL is configured, simulated otherwise"""
    if config.SYNC_API_URL:
        logger.info(f"🔧 Sync backend: {config.SYNC_API_URL}")
        return HttpSyncBackend(config.SYNC_API_URL)
    logger.info(f"🔧 Sync backend: simulated ({config.SYNC_LATENCY_SECONDS}s latency)")
    return SimulatedSyncBackend()
