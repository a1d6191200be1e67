import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Mapping, Optional

import pydantic

from errors import ValidationError
from schemas import DEFAULT_PAYMENT_METHOD, INITIAL_STATUS, Address, Customer, Order, order_dump

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("customer", "address", "items")
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_order_date(moment: datetime) -> str:
    # 2024-05-01T10:20:30.123Z
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_order_ref(moment: datetime, order_id: int) -> str:
    millis = (moment - EPOCH) // timedelta(milliseconds=1)
    return f"ORD-{millis}-{order_id}"


class OrderFactory:
    """
    Turns a checkout submission into a stored order record.

    ``counter`` is the counter collection store. Building an order advances its
    in-memory value by one; persisting the counter is left to the caller.
    """

    def __init__(self, counter, clock: Optional[Callable[[], datetime]] = None):
        self.counter = counter
        self.clock = clock or utc_now

    def validate(self, payload: Any) -> None:
        if not isinstance(payload, Mapping):
            raise ValidationError("Order payload must be a JSON object")
        missing = [name for name in REQUIRED_FIELDS if payload.get(name) is None]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        for name in ("customer", "address"):
            if not isinstance(payload[name], Mapping):
                raise ValidationError(f"'{name}' must be an object")

    def allocate_id(self) -> int:
        order_id = self.counter.snapshot()
        self.counter.replace(order_id + 1)
        return order_id

    def build(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        self.validate(payload)
        try:
            customer = Customer.model_validate(payload["customer"])
            address = Address.model_validate(payload["address"])
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid customer or address: {e.error_count()} error(s)") from e

        now = self.clock()
        try:
            order = Order(
                id=self.counter.snapshot(),
                orderId="",
                customer=customer,
                address=address,
                items=payload["items"],
                totalAmount=payload.get("totalAmount"),
                paymentMethod=payload.get("paymentMethod") or DEFAULT_PAYMENT_METHOD,
                notes=payload.get("notes") or "",
                status=INITIAL_STATUS,
                orderDate=format_order_date(now),
            )
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid order: {e.error_count()} error(s)") from e

        # Allocate only once the record is known to be valid
        order.id = self.allocate_id()
        order.orderId = make_order_ref(now, order.id)
        logger.debug("Built order %s", order.orderId)
        return order_dump(order)
