"""Declarative schemas for the document collections managed by the dashboard."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum


class FieldKind(StrEnum):
    """How a document field is coerced on read and write."""

    TEXT = "text"
    NUMBER = "number"
    LIST = "list"
    BOOL = "bool"
    OBJECT = "object"
    RAW = "raw"


@dataclass(frozen=True)
class FieldSpec:
    """Single field of a collection document."""

    name: str
    kind: FieldKind = FieldKind.TEXT
    default_factory: Callable[[], object] | None = None
    trim: bool = True

    def default(self) -> object:
        """Return a fresh default value for the field."""
        if self.default_factory is not None:
            return self.default_factory()
        return _KIND_DEFAULTS[self.kind]()


@dataclass(frozen=True)
class RequiredRule:
    """Fields that must be present together, with the error shown otherwise."""

    fields: tuple[str, ...]
    message: str
    allow_zero: bool = False


@dataclass(frozen=True)
class CollectionSchema:
    """Describes one collection: storage name, route, fields and write rules."""

    name: str
    route: str
    label: str
    fields: tuple[FieldSpec, ...]
    required: tuple[RequiredRule, ...] = ()
    writable: bool = False
    status_values: tuple[str, ...] = ()
    status_field: str = "status"

    @property
    def supports_status_update(self) -> bool:
        """Whether PUT only changes a status drawn from a fixed set."""
        return bool(self.status_values)

    def get_field(self, name: str) -> FieldSpec | None:
        """Return the field spec for a name, if declared."""
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None


_KIND_DEFAULTS: dict[FieldKind, Callable[[], object]] = {
    FieldKind.TEXT: lambda: "",
    FieldKind.NUMBER: lambda: 0,
    FieldKind.LIST: list,
    FieldKind.BOOL: lambda: False,
    FieldKind.OBJECT: dict,
    FieldKind.RAW: lambda: None,
}

ORDER_STATUSES: tuple[str, ...] = (
    "pending",
    "processing",
    "shipped",
    "delivered",
    "cancelled",
)


def _customer_info() -> dict[str, str]:
    return {"name": "", "email": "", "phone": "", "address": "", "city": ""}


ARTISTS = CollectionSchema(
    name="artists",
    route="artists",
    label="artist",
    fields=(
        FieldSpec("name"),
        FieldSpec("slug"),
        FieldSpec("title"),
        FieldSpec("socials", FieldKind.LIST),
        FieldSpec("bio", FieldKind.LIST),
        FieldSpec("imageUrl", trim=False),
    ),
    required=(RequiredRule(("name", "slug"), "Name and slug are required"),),
    writable=True,
)

PRODUCTS = CollectionSchema(
    name="products",
    route="store",
    label="product",
    fields=(
        FieldSpec("name"),
        FieldSpec("description"),
        FieldSpec("stock", FieldKind.NUMBER),
        FieldSpec("price", FieldKind.NUMBER),
        FieldSpec("images", FieldKind.LIST),
    ),
    required=(
        RequiredRule(("name",), "Product name is required"),
        RequiredRule(("stock",), "Stock is required", allow_zero=True),
        RequiredRule(("price",), "Price is required", allow_zero=True),
    ),
    writable=True,
)

TOURS = CollectionSchema(
    name="tours",
    route="tour",
    label="tour",
    fields=(
        FieldSpec("city"),
        FieldSpec("date"),
        FieldSpec("ticketsUrl"),
        FieldSpec("venue"),
    ),
    required=(
        RequiredRule(("city", "date", "venue"), "City, date, and venue are required"),
    ),
    writable=True,
)

UPDATES = CollectionSchema(
    name="updates",
    route="updates",
    label="update",
    fields=(
        FieldSpec("date"),
        FieldSpec("title"),
        FieldSpec("url"),
        FieldSpec("imageUrl", trim=False),
        FieldSpec("isAvailable", FieldKind.BOOL),
    ),
    required=(RequiredRule(("date", "title"), "Date and title are required"),),
    writable=True,
)

CONTACTS = CollectionSchema(
    name="contacts",
    route="contact-us",
    label="contact",
    fields=(
        FieldSpec("name"),
        FieldSpec("phone"),
        FieldSpec("email"),
        FieldSpec("comment"),
    ),
)

SUBSCRIBERS = CollectionSchema(
    name="subscribers",
    route="join-us",
    label="subscriber",
    fields=(FieldSpec("email", FieldKind.RAW),),
)

SUBMISSIONS = CollectionSchema(
    name="submissions",
    route="submit-music",
    label="submission",
    fields=(
        FieldSpec("role"),
        FieldSpec("submissionType"),
        FieldSpec("name"),
        FieldSpec("phone"),
        FieldSpec("email"),
        FieldSpec("artist"),
        FieldSpec("profile"),
    ),
)

ORDERS = CollectionSchema(
    name="orders",
    route="orders",
    label="order",
    fields=(
        FieldSpec("customerInfo", FieldKind.OBJECT, default_factory=_customer_info),
        FieldSpec("items", FieldKind.LIST),
        FieldSpec("paymentMethod", FieldKind.RAW),
        FieldSpec("subtotal", FieldKind.NUMBER),
        FieldSpec("shippingFee", FieldKind.NUMBER),
        FieldSpec("total", FieldKind.NUMBER),
        FieldSpec("status", default_factory=lambda: "pending"),
    ),
    status_values=ORDER_STATUSES,
)

COLLECTIONS: tuple[CollectionSchema, ...] = (
    ARTISTS,
    PRODUCTS,
    TOURS,
    UPDATES,
    CONTACTS,
    SUBSCRIBERS,
    SUBMISSIONS,
    ORDERS,
)

