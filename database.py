"""
JSON file stores

Every entity type lives in its own JSON file under DATA_DIR. A store reads the
whole file, callers mutate the value in memory, and the store writes the whole
file back.
"""
import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "data"


class StoreWriteError(Exception):
    """Raised when a store file could not be written."""


def data_dir() -> Path:
    return Path(os.getenv("DATA_DIR", DEFAULT_DATA_DIR))


class JsonStore:
    def __init__(
        self,
        filename: str,
        default: Any,
        label: Optional[str] = None,
        validator: Optional[Callable[[Any], bool]] = None,
    ):
        self.filename = filename
        self.default = default
        self.label = label or filename.rsplit(".", 1)[0]
        self.validator = validator
        # Held by action functions around read-modify-write
        self.lock = threading.RLock()

    @property
    def path(self) -> Path:
        return data_dir() / self.filename

    def _default(self) -> Any:
        return copy.deepcopy(self.default)

    def read(self) -> Any:
        path = self.path
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("%s not found, creating it with defaults", self.filename)
            return self._initialize()
        except OSError:
            logger.exception("Failed to read %s", self.filename)
            return self._default()

        if not raw.strip():
            logger.info("%s is empty, initializing with defaults", self.filename)
            return self._initialize()

        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse %s, using defaults: %s (content starts %r)", self.filename, e, raw[:200])
            return self._default()

        if not isinstance(value, type(self.default)) or (self.validator and not self.validator(value)):
            logger.warning("Invalid content in %s, using defaults", self.filename)
            return self._default()
        return value

    def _initialize(self) -> Any:
        try:
            self.write(self._default())
        except StoreWriteError:
            pass  # already logged, serve the default anyway
        return self._default()

    def write(self, value: Any) -> None:
        path = self.path
        tmp = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write to %s: %s", self.filename, e)
            if tmp and os.path.exists(tmp):
                os.unlink(tmp)
            raise StoreWriteError(f"Could not save {self.label} data.") from e


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == value


def _has_numbers(*keys: str) -> Callable[[Any], bool]:
    return lambda doc: all(_is_number(doc.get(k)) for k in keys)


DEFAULT_DISCOUNT_PERCENTAGE = 0
DEFAULT_TAX_RATE = 18
DEFAULT_SHIPPING_SETTINGS = {"rate": 50, "threshold": 5000}

users_store = JsonStore("users.json", {}, label="user")
products_store = JsonStore("products.json", [], label="product")
blogs_store = JsonStore("blogs.json", [], label="blog post")
coupons_store = JsonStore("coupons.json", [], label="coupon")
global_discount_store = JsonStore(
    "globalDiscount.json",
    {"percentage": DEFAULT_DISCOUNT_PERCENTAGE},
    label="global discount",
    validator=_has_numbers("percentage"),
)
tax_store = JsonStore("tax.json", {"rate": DEFAULT_TAX_RATE}, label="tax", validator=_has_numbers("rate"))
shipping_store = JsonStore(
    "shippingSettings.json",
    DEFAULT_SHIPPING_SETTINGS,
    label="shipping settings",
    validator=_has_numbers("rate", "threshold"),
)
admin_store = JsonStore("earthpuranadmin.json", {}, label="admin credentials")

ALL_STORES = [
    users_store,
    products_store,
    blogs_store,
    coupons_store,
    global_discount_store,
    tax_store,
    shipping_store,
    admin_store,
]
