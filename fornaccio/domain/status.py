"""
Order lifecycle.

Every status string that enters the system (admin board, payment provider,
legacy rows) goes through ``normalize_status`` exactly once, so the rest of the
code only ever compares ``OrderStatus`` members.
"""
import enum

from fornaccio.domain.errors import InvalidStatusError, InvalidTransitionError


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERING = "DELIVERING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    def __str__(self) -> str:
        return self.value


STATUS_ALIASES = {
    "LIVRAISON": OrderStatus.DELIVERING,
    "ON_THE_WAY": OrderStatus.DELIVERING,
    "OUT_FOR_DELIVERY": OrderStatus.DELIVERING,
    "COMPLETED": OrderStatus.DELIVERED,
    "DONE": OrderStatus.DELIVERED,
    "CANCELED": OrderStatus.CANCELLED,
    "FAILED": OrderStatus.CANCELLED,
    "EXPIRED": OrderStatus.CANCELLED,
    "PAID": OrderStatus.CONFIRMED,
    "CREATED": OrderStatus.PENDING,
    "OPEN": OrderStatus.PENDING,
}

TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.DELIVERING},
    OrderStatus.READY: {OrderStatus.DELIVERING, OrderStatus.DELIVERED},
    OrderStatus.DELIVERING: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

BOARD_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.READY)
ACTIVE_DELIVERY_STATUSES = (OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.DELIVERING)

# Kanban columns: unpaid and paid orders share the "new" column.
BOARD_COLUMNS = {
    OrderStatus.PENDING: (OrderStatus.PENDING, OrderStatus.CONFIRMED),
    OrderStatus.PREPARING: (OrderStatus.PREPARING,),
    OrderStatus.READY: (OrderStatus.READY,),
}

TRACKING_STAGES = {
    OrderStatus.PENDING: "awaiting_payment",
    OrderStatus.CONFIRMED: "confirmed",
    OrderStatus.PREPARING: "preparing",
    OrderStatus.READY: "on_the_way",
    OrderStatus.DELIVERING: "on_the_way",
    OrderStatus.DELIVERED: "delivered",
    OrderStatus.CANCELLED: "cancelled",
}


def normalize_status(raw) -> OrderStatus:
    """Map any accepted spelling of a status onto the closed enum."""
    if isinstance(raw, OrderStatus):
        return raw
    if raw is None:
        raise InvalidStatusError("Missing order status")

    key = str(raw).strip().upper().replace("-", "_").replace(" ", "_")
    if key in OrderStatus.__members__:
        return OrderStatus[key]
    if key in STATUS_ALIASES:
        return STATUS_ALIASES[key]
    raise InvalidStatusError(f"Unknown order status: {raw!r}")


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return current == target or target in TRANSITIONS[current]


def ensure_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(f"Cannot move order from {current} to {target}")


def is_advanced(status: OrderStatus) -> bool:
    """True once an order has left PENDING; payment checks must not touch it anymore."""
    return status != OrderStatus.PENDING


def tracking_stage(status: OrderStatus) -> str:
    return TRACKING_STAGES[status]
