from __future__ import annotations

import pytest
from shakegate.gates.login import LoginGate
from shakegate.motion.detector import ShakeDetector
from shakegate.motion.hub import SensorHub
from shakegate.persistence.lockout_store import LockoutStore

from tests.fakes import FakeClock, InMemoryKeyValueStore, RecordingFeedback


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def lockout_store(kv_store: InMemoryKeyValueStore, clock: FakeClock) -> LockoutStore:
    return LockoutStore(kv_store, clock)


@pytest.fixture
def hub() -> SensorHub:
    return SensorHub()


@pytest.fixture
def detector(hub: SensorHub) -> ShakeDetector:
    return ShakeDetector(hub)


@pytest.fixture
def feedback() -> RecordingFeedback:
    return RecordingFeedback()


@pytest.fixture
def gate(lockout_store: LockoutStore) -> LoginGate:
    return LoginGate(lockout_store, pin="711520")
