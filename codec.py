"""
Collection codecs

Each collection is stored as one pretty-printed JSON document. A codec knows
the file name, how to turn the in-memory value into text and back, and what
the collection holds when its file is absent or unreadable.
"""

import copy
import json
from typing import Any, Callable

from catalog import DEFAULT_BANNERS, DEFAULT_PRODUCTS
from errors import LoadError

DEFAULT_ORDER_ID = 1001
COUNTER_KEY = "orderIdCounter"


def dump_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


class Codec:
    def __init__(self, name: str, default: Callable[[], Any]):
        self.name = name
        self.filename = f"{name}.json"
        self._default = default

    def default(self) -> Any:
        return self._default()

    def encode(self, value: Any) -> str:
        return dump_json(value)

    def decode(self, text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise LoadError(f"Invalid JSON in {self.filename}: {e}") from e


class ListCodec(Codec):
    """Products and banners: a JSON array of opaque values."""

    def decode(self, text: str) -> list:
        value = super().decode(text)
        if not isinstance(value, list):
            raise LoadError(f"{self.filename} must hold a JSON array, got {type(value).__name__}")
        return value


class RecordListCodec(ListCodec):
    """Orders: a JSON array whose every element is an object."""

    def decode(self, text: str) -> list:
        value = super().decode(text)
        for index, record in enumerate(value):
            if not isinstance(record, dict):
                raise LoadError(f"{self.filename} entry {index} is {type(record).__name__}, not an object")
        return value


class CounterCodec(Codec):
    """The order counter, stored as ``{"orderIdCounter": <next id>}``."""

    def __init__(self):
        super().__init__("counter", lambda: DEFAULT_ORDER_ID)

    def encode(self, value: int) -> str:
        return dump_json({COUNTER_KEY: value})

    def decode(self, text: str) -> int:
        value = super().decode(text)
        if not isinstance(value, dict):
            raise LoadError(f"{self.filename} must hold a JSON object")
        counter = value.get(COUNTER_KEY)
        # bool is an int subclass; 1500.0 from a hand edit is still a whole number
        if isinstance(counter, float) and counter.is_integer():
            counter = int(counter)
        if isinstance(counter, bool) or not isinstance(counter, int) or counter < 1:
            raise LoadError(f"{self.filename} has no valid {COUNTER_KEY}: {counter!r}")
        return counter


ORDERS = RecordListCodec("orders", list)
PRODUCTS = ListCodec("products", lambda: copy.deepcopy(DEFAULT_PRODUCTS))
BANNERS = ListCodec("banners", lambda: copy.deepcopy(DEFAULT_BANNERS))
COUNTER = CounterCodec()
