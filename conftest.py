import pytest

from events import Connectivity, EventBus
from models import Patient
from offline_storage import LocalRecordStore, MemoryStorage


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def connectivity(bus):
    return Connectivity(bus, online=True)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, connectivity, bus):
    return LocalRecordStore(storage, connectivity, bus)


@pytest.fixture
def make_patient():
    def _make(**overrides):
        fields = {
            "name": "Harpreet Kaur",
            "email": "harpreet@example.com",
            "phone": "98140-00000",
            "age": 40,
            "current_symptoms": [],
            "medical_history": [],
        }
        fields.update(overrides)
        return Patient(**fields)

    return _make
