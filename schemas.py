"""
Record Schemas

Pydantic models for the records kept by the store. Orders are shaped by these
models when they are created; once stored they live as plain JSON objects in
orders.json. Products and banners are never modelled: the admin panel owns
their shape and the store passes every field through untouched.

Collections on disk:
- orders.json   -> list of Order
- products.json -> list of opaque objects
- banners.json  -> list of opaque objects
- counter.json  -> {"orderIdCounter": <next id>}
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional

DEFAULT_PAYMENT_METHOD = "COD"
INITIAL_STATUS = "Pending"


class Customer(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    fullName: Optional[str] = Field(None, description="Customer full name")
    phone: Optional[str] = Field(None, description="Contact number")
    email: Optional[str] = Field(None, description="Email address, null when blank")

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_null(cls, value: Any) -> Any:
        return value or None


class Address(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    houseNo: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    landmark: Optional[str] = Field(None, description="Null when blank")

    @field_validator("landmark", mode="before")
    @classmethod
    def blank_landmark_is_null(cls, value: Any) -> Any:
        return value or None


class Order(BaseModel):
    """
    Orders collection schema
    ``id`` is the only guaranteed-unique key; ``orderId`` is for humans.
    ``items`` and ``totalAmount`` are stored exactly as submitted.
    """
    id: int = Field(..., description="Allocated from the order counter")
    orderId: str = Field(..., description="Human-facing order reference")
    customer: Customer
    address: Address
    items: Any
    totalAmount: Any = None
    paymentMethod: str = DEFAULT_PAYMENT_METHOD
    notes: str = ""
    status: str = INITIAL_STATUS
    orderDate: str = Field(..., description="ISO-8601 UTC creation time")


class OrderUpdate(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None


class CatalogPayload(BaseModel):
    products: Optional[List[Any]] = None
    banners: Optional[List[Any]] = None


class CatalogOut(BaseModel):
    products: List[Any]
    banners: List[Any]


class StoreStats(BaseModel):
    totalOrders: int
    totalProducts: int
    totalBanners: int
    nextOrderId: int
    dirty: List[str] = []


def order_dump(order: Order) -> Dict[str, Any]:
    return order.model_dump(mode="json")
