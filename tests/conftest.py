"""Pytest configuration and shared fixtures for bundle tests."""

import re
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from ledger_infrastructure.database import create_tables  # noqa: E402
from ledger_infrastructure.writer import RecordWriter  # noqa: E402

PAYER_ID = "b" * 32
PAYEE_ID = "a" * 32
DEVELOPER_ID = "c" * 32
SCOPE = "d" * 32
PAYER_ACCOUNT_ID = "1" * 32
PAYEE_ACCOUNT_ID = "2" * 32
FIXED_NOW = datetime(2026, 1, 11, 10, 0, 0, tzinfo=timezone.utc)


@dataclass
class StoreCall:
    """One call received by the recording store."""

    kind: str  # "statement" or "batch"
    scope: str
    sql: str
    parameters: Any

    @property
    def table(self) -> str:
        return re.match(r"INSERT INTO (\w+)", self.sql).group(1)


class RecordingStore:
    """
    In-memory store implementing StoreProtocol for testing.

    Records every call for assertions. Can be told to raise on the N-th
    call (1-based) to simulate a store failure mid-bundle.
    """

    def __init__(self, fail_on_call: int | None = None, error: Exception | None = None):
        self.fail_on_call = fail_on_call
        self.error = error or RuntimeError("store unavailable")
        self.attempts = 0
        self.calls: list[StoreCall] = []

    def _record(self, call: StoreCall) -> None:
        self.attempts += 1
        if self.attempts == self.fail_on_call:
            raise self.error
        self.calls.append(call)

    def execute_statement(self, scope, sql, parameters):
        self._record(StoreCall("statement", scope, sql, dict(parameters)))

    def execute_batch(self, scope, sql, parameter_sets):
        self._record(StoreCall("batch", scope, sql, [dict(parameters) for parameters in parameter_sets]))

    @property
    def tables(self) -> list[str]:
        return [call.table for call in self.calls]


class SequentialIds:
    """Deterministic id generator yielding 000..01, 000..02, ..."""

    def __init__(self):
        self.issued = 0

    def __call__(self, length: int) -> str:
        self.issued += 1
        return format(self.issued, "x").zfill(length)


@pytest.fixture
def recording_store():
    """Fixture providing an empty recording store."""
    return RecordingStore()


@pytest.fixture
def sequential_ids():
    return SequentialIds()


@pytest.fixture
def writer(recording_store, sequential_ids):
    """Fixture providing a writer over the recording store with predictable ids and time."""
    return RecordWriter(recording_store, id_generator=sequential_ids, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_failing_writer(sequential_ids):
    """Fixture factory returning (writer, store) where the store raises on the given call."""

    def _make(fail_on_call: int, error: Exception) -> tuple[RecordWriter, RecordingStore]:
        store = RecordingStore(fail_on_call=fail_on_call, error=error)
        return RecordWriter(store, id_generator=sequential_ids, clock=lambda: FIXED_NOW), store

    return _make


@pytest.fixture
def card_purchase():
    """Fixture providing a valid card purchase dict."""
    return {
        "payer_id": PAYER_ID,
        "payee_id": PAYEE_ID,
        "developer_id": DEVELOPER_ID,
        "amount": 100,
        "interaction_type_id": 1,
        "payment_method": 1,
    }


@pytest.fixture
def settlement_purchase():
    """Fixture providing a valid real-time settlement purchase with both account ids."""
    return {
        "payer_id": PAYER_ID,
        "payee_id": PAYEE_ID,
        "developer_id": DEVELOPER_ID,
        "amount": 250.5,
        "interaction_type_id": 2,
        "payment_method": 0,
        "payer_account_id": PAYER_ACCOUNT_ID,
        "payee_account_id": PAYEE_ACCOUNT_ID,
    }


@pytest.fixture
def sqlite_engine():
    """Fixture providing an in-memory SQLite engine with the bundle tables."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    create_tables(engine)
    yield engine
    engine.dispose()
