import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from database import UNSET, RecordStore
from errors import NotFoundError, PersistenceError, ValidationError
from logging_setup import configure
from schemas import CatalogOut, CatalogPayload, OrderUpdate
from settings import get_settings
from storage import StorageGateway

logger = logging.getLogger(__name__)


async def load_storage(app: FastAPI) -> RecordStore:
    settings = app.state.settings
    configure(settings.log_level)
    store = RecordStore(settings.data_dir, gateway=StorageGateway(fsync=settings.fsync))
    await store.initialize()
    app.state.store = store
    app.state.started_at = time.monotonic()
    stats = store.stats()
    logger.info(
        "ShopZone server ready | orders: %d | products: %d | banners: %d | storage: %s",
        stats.totalOrders,
        stats.totalProducts,
        stats.totalBanners,
        settings.data_dir,
    )
    return store


async def flush_storage(store: RecordStore) -> None:
    logger.info("Shutting down, saving data...")
    if await store.flush_all():
        logger.info("All data saved successfully")
    else:
        logger.error("Some data could not be saved on shutdown")


# uvicorn accepts no requests until the store has loaded, and runs the
# flush on SIGINT/SIGTERM before the process exits
@asynccontextmanager
async def lifespan(app: FastAPI):
    store = await load_storage(app)
    try:
        yield
    finally:
        await flush_storage(store)


app = FastAPI(title="ShopZone API", lifespan=lifespan)
app.state.settings = get_settings()

app.add_middleware(
    CORSMiddleware,
    allow_origins=app.state.settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


async def get_store(request: Request) -> RecordStore:
    store = getattr(request.app.state, "store", None)
    if store is None or not store.initialized:
        raise HTTPException(status_code=503, detail="Storage not initialised")
    return store


@app.get("/")
async def read_root(store: RecordStore = Depends(get_store)):
    stats = store.stats()
    return {
        "message": "ShopZone API Running",
        "status": "online",
        "stats": stats.model_dump(exclude={"dirty"}),
        "timestamp": timestamp(),
    }


@app.get("/api/health")
async def health(request: Request, store: RecordStore = Depends(get_store)):
    dirty = store.stats().dirty
    return {
        "status": "degraded" if dirty else "healthy",
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "dirty": dirty,
        "timestamp": timestamp(),
    }


# ---------------------- Catalog ----------------------
@app.get("/api/data", response_model=CatalogOut)
async def get_catalog(store: RecordStore = Depends(get_store)):
    products, banners = store.list_catalog()
    return {"products": products, "banners": banners}


@app.post("/api/data")
async def save_catalog(payload: CatalogPayload, store: RecordStore = Depends(get_store)):
    try:
        await store.replace_catalog(payload.products or [], payload.banners or [])
    except PersistenceError as e:
        logger.error("Error saving data: %s", e)
        raise HTTPException(status_code=500, detail="Failed to save data")
    return {"success": True, "message": "Data saved successfully"}


# ---------------------- Orders ----------------------
@app.get("/api/orders", response_model=List[Dict[str, Any]])
async def list_orders(store: RecordStore = Depends(get_store)):
    return store.list_orders()


@app.post("/api/orders", status_code=201)
async def create_order(payload: Any = Body(None), store: RecordStore = Depends(get_store)):
    try:
        order = await store.create_order(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        logger.error("Error creating order: %s", e)
        raise HTTPException(status_code=500, detail="Failed to save order")
    return {"success": True, "orderId": order["orderId"], "order": order}


@app.get("/api/orders/{order_id}")
async def get_order(order_id: int, store: RecordStore = Depends(get_store)):
    try:
        return store.get_order(order_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")


@app.put("/api/orders/{order_id}")
async def update_order(order_id: int, payload: OrderUpdate, store: RecordStore = Depends(get_store)):
    try:
        notes = payload.notes if "notes" in payload.model_fields_set else UNSET
        order = await store.update_order(order_id, status=payload.status, notes=notes)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except PersistenceError as e:
        logger.error("Error updating order: %s", e)
        raise HTTPException(status_code=500, detail="Failed to update order")
    return {"success": True, "order": order}


@app.delete("/api/orders/{order_id}")
async def delete_order(order_id: int, store: RecordStore = Depends(get_store)):
    try:
        await store.delete_order(order_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except PersistenceError as e:
        logger.error("Error deleting order: %s", e)
        raise HTTPException(status_code=500, detail="Failed to delete order")
    return {"success": True, "message": "Order deleted successfully"}


if __name__ == "__main__":
    import uvicorn
    settings = app.state.settings
    configure(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)
