import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import desc, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from fornaccio.domain.errors import NotFoundError
from fornaccio.domain.models import Order, OrderItem
from fornaccio.domain.pricing import PricedLine, order_total
from fornaccio.domain.status import OrderStatus
from fornaccio.infrastructure.database import SessionLocal
from fornaccio.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _build_items(lines: List[PricedLine]) -> List[OrderItem]:
    return [
        OrderItem(
            pizza_name=line.pizza_name,
            base_price=line.base_price,
            final_price=line.line_total,
            quantity=line.quantity,
            added_ingredients=list(line.added),
            removed_ingredients=list(line.removed),
        )
        for line in lines
    ]


class SqlOrderRepository(IOrderRepository):

    def create_order(self, snapshot: dict, lines: List[PricedLine], customer_id: Optional[int]) -> Order:
        session = SessionLocal()
        try:
            order = Order(
                customer_id=customer_id,
                status=OrderStatus.PENDING,
                total=order_total(lines),
                items=_build_items(lines),
                **snapshot,
            )
            session.add(order)
            session.commit()
            return self._load(session, order.id)
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error while creating order: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def replace_order(self, order_id: int, snapshot: dict, lines: List[PricedLine], customer_id: Optional[int]) -> Order:
        """Swaps the customer snapshot and every line item in one transaction."""
        session = SessionLocal()
        try:
            order = session.get(Order, order_id, options=[selectinload(Order.items)])
            if order is None:
                raise NotFoundError("Commande introuvable")
            for key, value in snapshot.items():
                setattr(order, key, value)
            order.customer_id = customer_id
            order.items = _build_items(lines)
            order.total = order_total(lines)
            order.updated_at = _now()
            session.commit()
            return self._load(session, order_id)
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error while replacing order #{order_id}: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def get_order(self, order_id: int) -> Optional[Order]:
        session = SessionLocal()
        try:
            return self._load(session, order_id)
        finally:
            session.close()

    def latest_order(self) -> Optional[Order]:
        session = SessionLocal()
        try:
            return (
                session.query(Order)
                .options(selectinload(Order.items))
                .order_by(desc(Order.created_at), desc(Order.id))
                .first()
            )
        finally:
            session.close()

    def set_payment_id(self, order_id: int, payment_id: str) -> Order:
        return self._update(order_id, payment_id=payment_id)

    def set_status(self, order_id: int, status: OrderStatus) -> Order:
        return self._update(order_id, status=status, updated_at=_now())

    def transition_status(self, order_id: int, expected: OrderStatus, status: OrderStatus) -> int:
        """Moves the order only if it is still in `expected`. Returns the number of rows changed (0 or 1)."""
        session = SessionLocal()
        try:
            result = session.execute(
                update(Order)
                .where(Order.id == order_id, Order.status == expected)
                .values(status=status, updated_at=_now())
            )
            session.commit()
            return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error while moving order #{order_id} to {status}: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def set_driver_location(self, order_id: int, lat: float, lng: float) -> Order:
        return self._update(order_id, driver_lat=lat, driver_lng=lng, updated_at=_now())

    def set_driver_location_for_statuses(self, statuses: Iterable[OrderStatus], lat: float, lng: float) -> int:
        session = SessionLocal()
        try:
            result = session.execute(
                update(Order)
                .where(Order.status.in_(list(statuses)))
                .values(driver_lat=lat, driver_lng=lng, updated_at=_now())
            )
            session.commit()
            return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error while updating driver location: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def list_by_status(self, statuses: Iterable[OrderStatus], newest_first: bool = False) -> List[Order]:
        session = SessionLocal()
        try:
            order_by = (desc(Order.created_at), desc(Order.id)) if newest_first else (Order.created_at, Order.id)
            return (
                session.query(Order)
                .options(selectinload(Order.items))
                .filter(Order.status.in_(list(statuses)))
                .order_by(*order_by)
                .all()
            )
        finally:
            session.close()

    def list_pending_payments(self, created_after: datetime) -> List[Order]:
        session = SessionLocal()
        try:
            return (
                session.query(Order)
                .filter(Order.status == OrderStatus.PENDING)
                .filter(Order.payment_id.isnot(None))
                .filter(Order.created_at >= created_after)
                .all()
            )
        finally:
            session.close()

    # --- Stats ---

    def revenue_summary(self, created_after: Optional[datetime] = None) -> tuple:
        """(order count, revenue) over non-cancelled orders."""
        session = SessionLocal()
        try:
            query = session.query(func.count(Order.id), func.coalesce(func.sum(Order.total), 0.0)).filter(
                Order.status != OrderStatus.CANCELLED
            )
            if created_after is not None:
                query = query.filter(Order.created_at >= created_after)
            count, revenue = query.one()
            return int(count or 0), float(revenue or 0.0)
        finally:
            session.close()

    def best_sellers(self, limit: int = 5) -> List[tuple]:
        """(pizza name, quantity sold, revenue) for non-cancelled orders, best revenue first."""
        session = SessionLocal()
        try:
            revenue = func.sum(OrderItem.final_price)
            rows = (
                session.query(OrderItem.pizza_name, func.sum(OrderItem.quantity), revenue)
                .join(Order, Order.id == OrderItem.order_id)
                .filter(Order.status != OrderStatus.CANCELLED)
                .group_by(OrderItem.pizza_name)
                .order_by(desc(revenue), OrderItem.pizza_name)
                .limit(limit)
                .all()
            )
            return [(name, int(count or 0), float(total or 0.0)) for name, count, total in rows]
        finally:
            session.close()

    # --- Helpers ---

    def _load(self, session, order_id: int) -> Optional[Order]:
        return (
            session.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.id == order_id)
            .first()
        )

    def _update(self, order_id: int, **values) -> Order:
        session = SessionLocal()
        try:
            order = session.get(Order, order_id)
            if order is None:
                raise NotFoundError("Commande introuvable")
            for key, value in values.items():
                setattr(order, key, value)
            session.commit()
            return self._load(session, order_id)
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error while updating order #{order_id}: {e}")
            session.rollback()
            raise
        finally:
            session.close()
