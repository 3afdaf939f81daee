"""
CareSync: Local Record Store
Per-entity record lists plus pending-sync queues over a durable key-value medium
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ValidationError

import config
from errors import RecordNotFoundError, RecordValidationError, StorageError
from events import Connectivity, EventBus, NotificationLevel
from models import ENTITY_MODELS, EntityType, SyncableRecord

logger = logging.getLogger(__name__)

# ============================================================================
# STORAGE KEYS
# ============================================================================

RECORD_KEYS = {
    EntityType.PATIENTS: "patients",
    EntityType.PRESCRIPTIONS: "prescriptions",
    EntityType.APPOINTMENTS: "appointments",
    EntityType.PHARMACY: "pharmacyData",
}

PENDING_KEYS = {
    EntityType.PATIENTS: "pendingPatients",
    EntityType.PRESCRIPTIONS: "pendingPrescriptions",
    EntityType.APPOINTMENTS: "pendingAppointments",
    EntityType.PHARMACY: "pendingPharmacy",
}

OFFLINE_NOTICES = {
    EntityType.PATIENTS: ("Patient Registered Offline", "Data will sync when online"),
    EntityType.PRESCRIPTIONS: ("Prescription Saved Offline", "Will sync when online"),
    EntityType.APPOINTMENTS: ("Appointment Saved Offline", "Will sync when online"),
    EntityType.PHARMACY: ("Inventory Saved Offline", "Will sync when online"),
}

# ============================================================================
# KEY-VALUE MEDIA
# ============================================================================

class MemoryStorage:
    """Volatile string key-value medium"""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)

    def size_bytes(self, changes: Optional[Dict[str, str]] = None) -> int:
        """Serialized size, optionally as if `changes` had been written"""
        items = self._items if not changes else {**self._items, **changes}
        return len(json.dumps(items).encode("utf-8"))


class JsonFileStorage(MemoryStorage):
    """
    Durable medium backed by a single JSON file.
    Every write rewrites the whole file through a temp file + os.replace.
    """

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read local storage at {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Local storage at {self.path} is not a key-value object")
        self._items = {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._items, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write local storage at {self.path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        previous = self._items.get(key)
        super().set_item(key, value)
        try:
            self._flush()
        except StorageError:
            # keep memory consistent with what is on disk
            if previous is None:
                self._items.pop(key, None)
            else:
                self._items[key] = previous
            raise

    def remove_item(self, key: str) -> None:
        if key not in self._items:
            return
        super().remove_item(key)
        self._flush()


# ============================================================================
# LOCAL RECORD STORE
# ============================================================================

class LocalRecordStore:
    """
    Append-only per-entity lists with a parallel pending queue.

    Each write is a read-modify-write of the whole list. Records are validated
    against their entity model before anything is persisted.
    """

    def __init__(self, storage: MemoryStorage, connectivity: Connectivity, bus: EventBus,
                 quota_bytes: int = config.STORAGE_QUOTA_BYTES):
        self.storage = storage
        self.connectivity = connectivity
        self.bus = bus
        self.quota_bytes = quota_bytes

    # ------------------------------------------------------------------ writes

    def store(self, entity_type: Union[EntityType, str],
              record: Union[SyncableRecord, Dict[str, Any]]) -> SyncableRecord:
        """Validate, stamp and persist `record`; queue it when offline"""
        entity_type = EntityType(entity_type)
        offline = not self.connectivity.online

        stamped = self._validate(entity_type, record).model_copy(update={
            "stored_at": datetime.now(),
            "pending_sync": offline,
        })
        payload = self._dump(stamped)

        if entity_type is EntityType.PHARMACY:
            writes = {RECORD_KEYS[entity_type]: payload}
        else:
            records = self._read_list(RECORD_KEYS[entity_type])
            records.append(payload)
            writes = {RECORD_KEYS[entity_type]: records}

        if offline:
            pending = self._read_list(PENDING_KEYS[entity_type])
            pending.append(payload)
            writes[PENDING_KEYS[entity_type]] = pending

        self._write_many(writes)

        if offline:
            logger.info(f"📥 Queued {entity_type.value} for sync ({len(pending)} pending)")
            title, message = OFFLINE_NOTICES[entity_type]
            self.bus.notify(title, message, NotificationLevel.INFO)
        else:
            logger.info(f"💾 Stored {entity_type.value} record {getattr(stamped, 'id', '')}")

        return stamped

    def update(self, entity_type: Union[EntityType, str],
               record: Union[SyncableRecord, Dict[str, Any]]) -> SyncableRecord:
        """Replace the stored record sharing `record.id`"""
        entity_type = EntityType(entity_type)
        if entity_type is EntityType.PHARMACY:
            return self.store(entity_type, record)

        offline = not self.connectivity.online
        stamped = self._validate(entity_type, record).model_copy(update={
            "stored_at": datetime.now(),
            "pending_sync": offline,
        })
        payload = self._dump(stamped)

        key = RECORD_KEYS[entity_type]
        records = self._read_list(key)
        for i, existing in enumerate(records):
            if existing.get("id") == stamped.id:
                records[i] = payload
                break
        else:
            raise RecordNotFoundError(f"No {entity_type.value} record with id {stamped.id}")

        writes = {key: records}
        if offline:
            # a record already waiting to sync is superseded, not sent twice
            pending = self._read_list(PENDING_KEYS[entity_type])
            for i, queued in enumerate(pending):
                if queued.get("id") == stamped.id:
                    pending[i] = payload
                    break
            else:
                pending.append(payload)
            writes[PENDING_KEYS[entity_type]] = pending

        self._write_many(writes)
        return stamped

    def drain_pending(self, entity_type: Union[EntityType, str], count: int) -> None:
        """Drop the first `count` pending records (an acknowledged flush)"""
        entity_type = EntityType(entity_type)
        key = PENDING_KEYS[entity_type]
        remaining = self._read_list(key)[count:]
        if remaining:
            self._write(key, remaining)
        else:
            self._remove(key)

    def clear_all(self) -> None:
        """Remove every entity list and pending queue"""
        for key in list(RECORD_KEYS.values()) + list(PENDING_KEYS.values()):
            self._remove(key)
        logger.info("🧹 Local data cleared")
        self.bus.notify("Offline Data Cleared", "All local data has been removed", NotificationLevel.INFO)

    # ------------------------------------------------------------------- reads

    def list_all(self, entity_type: Union[EntityType, str]) -> List[SyncableRecord]:
        entity_type = EntityType(entity_type)
        model = ENTITY_MODELS[entity_type]
        if entity_type is EntityType.PHARMACY:
            snapshot = self._read(RECORD_KEYS[entity_type], None)
            return [model.model_validate(snapshot)] if snapshot else []
        return [model.model_validate(item) for item in self._read_list(RECORD_KEYS[entity_type])]

    def list_pending(self, entity_type: Union[EntityType, str]) -> List[SyncableRecord]:
        entity_type = EntityType(entity_type)
        model = ENTITY_MODELS[entity_type]
        return [model.model_validate(item) for item in self._read_list(PENDING_KEYS[entity_type])]

    def get(self, entity_type: Union[EntityType, str], record_id: str) -> SyncableRecord:
        for record in self.list_all(entity_type):
            if getattr(record, "id", None) == record_id:
                return record
        raise RecordNotFoundError(f"No {EntityType(entity_type).value} record with id {record_id}")

    def pending_counts(self) -> Dict[str, int]:
        return {
            entity_type.value: len(self._read_list(key))
            for entity_type, key in PENDING_KEYS.items()
        }

    def storage_usage(self) -> Dict[str, int]:
        return {"used": self.storage.size_bytes(), "available": self.quota_bytes}

    # ---------------------------------------------------------------- helpers

    def _validate(self, entity_type: EntityType, record) -> SyncableRecord:
        model = ENTITY_MODELS[entity_type]
        if isinstance(record, model):
            return record
        if isinstance(record, BaseModel):
            record = record.model_dump()
        try:
            return model.model_validate(record)
        except ValidationError as e:
            raise RecordValidationError(f"Invalid {entity_type.value} record: {e}") from e

    @staticmethod
    def _dump(record: SyncableRecord) -> Dict[str, Any]:
        return record.model_dump(mode="json")

    def _read(self, key: str, default):
        raw = self.storage.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value under '{key}': {e}") from e

    def _read_list(self, key: str) -> List[Dict[str, Any]]:
        value = self._read(key, [])
        if not isinstance(value, list):
            raise StorageError(f"Expected a list under '{key}'")
        return value

    def _write(self, key: str, value) -> None:
        self._write_many({key: value})

    def _write_many(self, writes: Dict[str, Any]) -> None:
        """Persist every key in `writes` or none of them"""
        serialized = {key: json.dumps(value, ensure_ascii=False) for key, value in writes.items()}
        if self.storage.size_bytes(serialized) > self.quota_bytes:
            raise StorageError(f"Storage quota exceeded writing {', '.join(repr(k) for k in serialized)}")

        previous = {key: self.storage.get_item(key) for key in serialized}
        written: List[str] = []
        try:
            for key, value in serialized.items():
                self.storage.set_item(key, value)
                written.append(key)
        except StorageError:
            for key in reversed(written):
                if previous[key] is None:
                    self.storage.remove_item(key)
                else:
                    self.storage.set_item(key, previous[key])
            raise

    def _remove(self, key: str) -> None:
        try:
            self.storage.remove_item(key)
        except OSError as e:
            raise StorageError(f"Cannot remove '{key}': {e}") from e
