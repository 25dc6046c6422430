from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from fornaccio.domain.status import OrderStatus
from fornaccio.infrastructure.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    phone = Column(String(32), unique=True, nullable=False, index=True)  # E.164
    first_name = Column(String(120), nullable=False, default="")
    last_name = Column(String(120), nullable=False, default="")
    email = Column(String(255))
    address = Column(String(500))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    orders = relationship(
        "Order",
        back_populates="customer",
        passive_deletes=True,
        order_by="[Order.created_at.desc(), Order.id.desc()]",
    )

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Ingredient(Base):
    __tablename__ = "ingredients"

    id = Column(String(64), primary_key=True)
    name = Column(String(120), nullable=False)
    price = Column(Float, nullable=False, default=0.0)
    category = Column(String(20), nullable=False)  # base, cheese, meat, vegetable, finish
    is_available = Column(Boolean, nullable=False, default=True)


class Pizza(Base):
    __tablename__ = "pizzas"

    id = Column(String(64), primary_key=True)
    slug = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=False, default="")
    base_price = Column(Float, nullable=False)
    image = Column(String(500), nullable=False, default="")
    # Default ingredient ids, as a native JSON array.
    ingredients = Column(JSON, nullable=False, default=list)
    is_available = Column(Boolean, nullable=False, default=True)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)

    # Snapshot of the customer at order time.
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(32), nullable=False, index=True)
    customer_address = Column(String(500), nullable=False)
    instructions = Column(Text, nullable=False, default="")
    fulfillment = Column(String(20), nullable=False, default="delivery")  # delivery, takeaway

    status = Column(
        Enum(OrderStatus, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )
    total = Column(Float, nullable=False, default=0.0)
    payment_id = Column(String(64), index=True)

    driver_lat = Column(Float)
    driver_lng = Column(Float)

    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    """
    A line item frozen at order time. Deliberately no foreign key to Pizza:
    catalog edits must never rewrite order history.
    """
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    pizza_name = Column(String(120), nullable=False)
    base_price = Column(Float, nullable=False)
    final_price = Column(Float, nullable=False)  # line total: unit price x quantity
    quantity = Column(Integer, nullable=False, default=1)
    added_ingredients = Column(JSON, nullable=False, default=list)
    removed_ingredients = Column(JSON, nullable=False, default=list)

    order = relationship("Order", back_populates="items")
