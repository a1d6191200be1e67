"""Shared fixtures for the record store tests."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from database import RecordStore
from errors import WriteError
from storage import StorageGateway

FIXED_NOW = datetime(2024, 5, 1, 10, 20, 30, 123000, tzinfo=timezone.utc)


class FlakyGateway(StorageGateway):
    """Gateway whose writes can be switched off, per file name or entirely."""

    def __init__(self):
        super().__init__(fsync=False)
        self.failing: set[str] = set()
        self.fail_all = False
        self.writes: list[str] = []

    def write_document(self, path: Path, content: str) -> None:
        name = Path(path).name
        if self.fail_all or name in self.failing:
            raise WriteError(f"Failed to write {path}: disk full")
        super().write_document(path, content)
        self.writes.append(name)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def gateway() -> FlakyGateway:
    return FlakyGateway()


@pytest.fixture
def make_store(data_dir, gateway):
    """Build a RecordStore inside the running event loop."""

    def _make(directory: Path | None = None, clock=lambda: FIXED_NOW) -> RecordStore:
        return RecordStore(directory or data_dir, gateway=gateway, factory_clock=clock)

    return _make


@pytest.fixture
def order_payload() -> dict:
    return {
        "customer": {"fullName": "A", "phone": "1"},
        "address": {
            "houseNo": "12",
            "street": "MG Road",
            "city": "Pune",
            "state": "MH",
            "pincode": "411001",
        },
        "items": [{"sku": "x", "qty": 2}],
        "totalAmount": 40,
    }


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW
