"""Tests for the storage gateway and the collection codecs."""

import json

import pytest

from catalog import DEFAULT_PRODUCTS
from codec import BANNERS, COUNTER, ORDERS, PRODUCTS
from errors import LoadError, WriteError
from storage import StorageGateway


class TestStorageGateway:
    def test_read_missing_file(self, tmp_path) -> None:
        with pytest.raises(LoadError) as exc_info:
            StorageGateway().read_document(tmp_path / "orders.json")
        assert exc_info.value.missing is True

    def test_write_replaces_whole_document(self, tmp_path) -> None:
        gateway = StorageGateway(fsync=False)
        path = tmp_path / "orders.json"

        gateway.write_document(path, "[1, 2, 3, 4, 5, 6]")
        gateway.write_document(path, "[]")

        assert path.read_text() == "[]"
        assert [p.name for p in tmp_path.iterdir()] == ["orders.json"]

    def test_write_into_missing_directory_fails(self, tmp_path) -> None:
        gateway = StorageGateway(fsync=False)

        with pytest.raises(WriteError):
            gateway.write_document(tmp_path / "absent" / "orders.json", "[]")

    @pytest.mark.asyncio
    async def test_async_write_reports_failure(self, tmp_path) -> None:
        gateway = StorageGateway(fsync=False)

        result = await gateway.write(tmp_path / "absent" / "orders.json", "[]")

        assert result.success is False
        assert "orders.json" in result.error

    @pytest.mark.asyncio
    async def test_async_round_trip(self, tmp_path) -> None:
        gateway = StorageGateway()
        path = tmp_path / "counter.json"

        result = await gateway.write(path, '{"orderIdCounter": 1001}')

        assert result.success is True
        assert await gateway.read(path) == '{"orderIdCounter": 1001}'

    def test_backup_corrupt(self, tmp_path) -> None:
        path = tmp_path / "banners.json"
        path.write_text("{oops")

        backup = StorageGateway().backup_corrupt(path)

        assert backup == tmp_path / "banners.json.corrupted"
        assert backup.read_text() == "{oops"

    def test_backup_missing_file_is_not_fatal(self, tmp_path) -> None:
        assert StorageGateway().backup_corrupt(tmp_path / "banners.json") is None


class TestCodecs:
    def test_file_names(self) -> None:
        assert [c.filename for c in (ORDERS, PRODUCTS, BANNERS, COUNTER)] == [
            "orders.json",
            "products.json",
            "banners.json",
            "counter.json",
        ]

    def test_documents_are_pretty_printed(self) -> None:
        text = ORDERS.encode([{"id": 1001, "customer": {"fullName": "Ananya Rao"}}])
        assert text.startswith('[\n  {\n    "id": 1001')

    def test_non_ascii_is_kept_readable(self) -> None:
        assert "₹" in PRODUCTS.encode([{"price": "₹499"}])

    def test_counter_document_shape(self) -> None:
        assert json.loads(COUNTER.encode(1042)) == {"orderIdCounter": 1042}

    @pytest.mark.parametrize(
        "text, expected",
        [
            ('{"orderIdCounter": 1042}', 1042),
            ('{"orderIdCounter": 1500.0}', 1500),
        ],
    )
    def test_counter_decode(self, text, expected) -> None:
        assert COUNTER.decode(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "[1001]",
            "not json",
            "",
            "{}",
            '{"orderIdCounter": 0}',
            '{"orderIdCounter": "12"}',
            '{"orderIdCounter": true}',
            '{"orderIdCounter": 1500.5}',
        ],
    )
    def test_counter_decode_rejects(self, text) -> None:
        with pytest.raises(LoadError):
            COUNTER.decode(text)

    def test_list_codec_rejects_objects(self) -> None:
        with pytest.raises(LoadError):
            ORDERS.decode('{"orders": []}')

    def test_orders_must_be_objects(self) -> None:
        with pytest.raises(LoadError, match="entry 1"):
            ORDERS.decode('[{"id": 1001}, 1]')

    def test_catalog_entries_stay_opaque(self) -> None:
        assert PRODUCTS.decode('[1, "two", {"three": 3}]') == [1, "two", {"three": 3}]

    def test_defaults_are_fresh_copies(self) -> None:
        products = PRODUCTS.default()
        products[0]["price"] = 1

        assert PRODUCTS.default() == DEFAULT_PRODUCTS
        assert ORDERS.default() == []
        assert ORDERS.default() is not ORDERS.default()
        assert COUNTER.default() == 1001
