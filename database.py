"""
Record store

Keeps the four collections (orders, products, banners and the order counter)
in memory and mirrors each one to its own JSON file under the data directory.

All methods run on a single asyncio event loop. In-memory mutations never
await part-way through, so a compound step such as "allocate an id and append
the order" cannot interleave with another request. The only suspension points
are the file reads and writes done by the storage gateway.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from codec import BANNERS, COUNTER, ORDERS, PRODUCTS, Codec
from errors import LoadError, NotFoundError, PersistenceError, RecoveryError
from orders import OrderFactory
from schemas import StoreStats
from storage import StorageGateway, WriteResult

logger = logging.getLogger(__name__)

# marks an update argument the caller did not send
UNSET = object()


class CollectionStore:
    """One collection held in memory and backed by one JSON document."""

    def __init__(self, codec: Codec, directory: Path, gateway: StorageGateway):
        self.codec = codec
        self.path = Path(directory) / codec.filename
        self.gateway = gateway
        self.value: Any = codec.default()
        self.dirty = False
        # bumped on every in-memory change; a write only clears ``dirty`` if none happened meanwhile
        self._generation = 0
        self._write_lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self.codec.name

    async def load(self) -> Any:
        """
        Read the backing file, or reset to the default and write it out.

        Raises RecoveryError when the default cannot be written either.
        """
        try:
            text = await self.gateway.read(self.path)
            self.value = self.codec.decode(text)
            self.dirty = False
            return self.value
        except LoadError as e:
            if e.missing:
                logger.info("No %s found, creating it", self.codec.filename)
            else:
                logger.warning("Could not load %s, resetting to default: %s", self.codec.filename, e)
                await self.gateway.backup(self.path)

        self.replace(self.codec.default())
        result = await self.persist()
        if not result.success:
            raise RecoveryError(f"Cannot initialise {self.codec.filename}: {result.error}")
        return self.value

    def snapshot(self) -> Any:
        return self.value

    def replace(self, value: Any) -> None:
        self.value = value
        self.mark_dirty()

    def mark_dirty(self) -> None:
        self._generation += 1
        self.dirty = True

    async def persist(self) -> WriteResult:
        """Write the current value to disk. Never raises; check ``success``."""
        async with self._write_lock:
            # Encode under the lock so the last write to land carries the newest state
            generation = self._generation
            content = self.codec.encode(self.value)
            result = await self.gateway.write(self.path, content)
            if not result.success:
                self.dirty = True
            elif generation == self._generation:
                self.dirty = False
            return result


class RecordStore:
    def __init__(self, data_dir: Path, gateway: Optional[StorageGateway] = None, factory_clock=None):
        self.data_dir = Path(data_dir)
        self.gateway = gateway or StorageGateway()
        self.orders = CollectionStore(ORDERS, self.data_dir, self.gateway)
        self.products = CollectionStore(PRODUCTS, self.data_dir, self.gateway)
        self.banners = CollectionStore(BANNERS, self.data_dir, self.gateway)
        self.counter = CollectionStore(COUNTER, self.data_dir, self.gateway)
        self.factory = OrderFactory(self.counter, clock=factory_clock)
        self.initialized = False

    @property
    def collections(self) -> List[CollectionStore]:
        return [self.orders, self.products, self.banners, self.counter]

    async def initialize(self) -> None:
        try:
            await asyncio.to_thread(self.data_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise RecoveryError(f"Cannot create data directory {self.data_dir}: {e}") from e
        logger.info("Data directory ready: %s", self.data_dir)

        for collection in self.collections:
            await collection.load()

        await self._reconcile_counter()
        self.initialized = True
        stats = self.stats()
        logger.info(
            "Loaded %d orders, %d products, %d banners; next order id %d",
            stats.totalOrders,
            stats.totalProducts,
            stats.totalBanners,
            stats.nextOrderId,
        )

    async def _reconcile_counter(self) -> None:
        ids = [o["id"] for o in self.orders.snapshot() if isinstance(o.get("id"), int)]
        if not ids:
            return
        floor = max(ids) + 1
        if self.counter.snapshot() >= floor:
            return
        logger.warning("Order counter %d is behind stored orders, advancing to %d", self.counter.snapshot(), floor)
        self.counter.replace(floor)
        result = await self.counter.persist()
        if not result.success:
            raise RecoveryError(f"Cannot save reconciled order counter: {result.error}")

    # Catalog

    def list_catalog(self) -> Tuple[List[Any], List[Any]]:
        return self.products.snapshot(), self.banners.snapshot()

    async def replace_catalog(self, products: List[Any], banners: List[Any]) -> None:
        self.products.replace(products)
        self.banners.replace(banners)
        results = await asyncio.gather(self.products.persist(), self.banners.persist())
        self._raise_on_failure(results, "Failed to save catalog")
        logger.info("Saved %d products, %d banners", len(products), len(banners))

    # Orders

    def list_orders(self) -> List[Dict[str, Any]]:
        return self.orders.snapshot()

    def get_order(self, order_id: int) -> Dict[str, Any]:
        for order in self.orders.snapshot():
            if order.get("id") == order_id:
                return order
        raise NotFoundError(order_id)

    async def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        order = self.factory.build(payload)
        self.orders.snapshot().append(order)
        self.orders.mark_dirty()

        results = await asyncio.gather(self.orders.persist(), self.counter.persist())
        self._raise_on_failure(results, "Failed to save order", record=order)
        logger.info(
            "New order %s | customer: %s | amount: %s",
            order["orderId"],
            order["customer"].get("fullName"),
            order["totalAmount"],
        )
        return order

    async def update_order(self, order_id: int, status: Optional[str] = None, notes: Any = UNSET) -> Dict[str, Any]:
        """Apply a non-empty ``status`` and any ``notes`` passed, including an explicit None."""
        order = self.get_order(order_id)
        if status:
            order["status"] = status
        if notes is not UNSET:
            order["notes"] = notes
        self.orders.mark_dirty()

        result = await self.orders.persist()
        self._raise_on_failure([result], "Failed to update order", record=order)
        logger.info("Updated order %s -> status: %s", order.get("orderId"), order.get("status"))
        return order

    async def delete_order(self, order_id: int) -> Dict[str, Any]:
        orders = self.orders.snapshot()
        for index, order in enumerate(orders):
            if order.get("id") == order_id:
                break
        else:
            raise NotFoundError(order_id)
        deleted = orders.pop(index)
        self.orders.mark_dirty()

        result = await self.orders.persist()
        self._raise_on_failure([result], "Failed to delete order", record=deleted)
        logger.info("Deleted order %s", deleted.get("orderId"))
        return deleted

    # Lifecycle

    async def flush_all(self) -> bool:
        results = await asyncio.gather(*(c.persist() for c in self.collections))
        ok = all(r.success for r in results)
        if ok:
            logger.info("All data saved")
        else:
            failed = [r.path for r in results if not r.success]
            logger.error("Flush failed for %s", ", ".join(failed))
        return ok

    def stats(self) -> StoreStats:
        return StoreStats(
            totalOrders=len(self.orders.snapshot()),
            totalProducts=len(self.products.snapshot()),
            totalBanners=len(self.banners.snapshot()),
            nextOrderId=self.counter.snapshot(),
            dirty=[c.name for c in self.collections if c.dirty],
        )

    @staticmethod
    def _raise_on_failure(results, message: str, record: Any = None) -> None:
        errors = [r.error for r in results if not r.success]
        if errors:
            raise PersistenceError(f"{message}: {'; '.join(errors)}", record=record)
