import logging
from typing import List, Optional

from sqlalchemy import desc, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from fornaccio.domain.errors import ConflictError, NotFoundError
from fornaccio.domain.models import Customer, Order
from fornaccio.infrastructure.database import SessionLocal

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10
DETAILS_ORDER_LIMIT = 10


class SqlCustomerRepository:
    """Customers are keyed by their normalized (E.164) phone number."""

    def upsert_by_phone(self, phone: str, first_name: str, last_name: str, address: Optional[str] = None) -> Customer:
        session = SessionLocal()
        try:
            customer = session.query(Customer).filter(Customer.phone == phone).first()
            if customer is None:
                customer = Customer(phone=phone, first_name=first_name, last_name=last_name, address=address)
                session.add(customer)
            else:
                customer.first_name = first_name
                customer.last_name = last_name
                if address:
                    customer.address = address
            session.commit()
            session.refresh(customer)
            return customer
        except SQLAlchemyError as e:
            logger.error(f"❌ Error upserting customer {phone}: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def list_with_orders(self) -> List[Customer]:
        session = SessionLocal()
        try:
            return (
                session.query(Customer)
                .options(selectinload(Customer.orders).selectinload(Order.items))
                .order_by(desc(Customer.updated_at), desc(Customer.id))
                .all()
            )
        finally:
            session.close()

    def search(self, query: str) -> List[Customer]:
        session = SessionLocal()
        try:
            pattern = f"%{query}%"
            return (
                session.query(Customer)
                .filter(or_(
                    Customer.last_name.ilike(pattern),
                    Customer.first_name.ilike(pattern),
                    Customer.phone.contains(query),
                ))
                .order_by(Customer.last_name, Customer.first_name)
                .limit(SEARCH_LIMIT)
                .all()
            )
        finally:
            session.close()

    def get(self, customer_id: int) -> Optional[Customer]:
        session = SessionLocal()
        try:
            return session.get(Customer, customer_id)
        finally:
            session.close()

    def details_by_phone(self, phone: str) -> Optional[dict]:
        """Customer, their latest orders, and lifetime totals."""
        session = SessionLocal()
        try:
            customer = session.query(Customer).filter(Customer.phone == phone).first()
            if customer is None:
                return None
            orders = (
                session.query(Order)
                .options(selectinload(Order.items))
                .filter(Order.customer_id == customer.id)
                .order_by(desc(Order.created_at), desc(Order.id))
                .limit(DETAILS_ORDER_LIMIT)
                .all()
            )
            count, spent = (
                session.query(func.count(Order.id), func.coalesce(func.sum(Order.total), 0.0))
                .filter(Order.customer_id == customer.id)
                .one()
            )
            return {
                "customer": customer,
                "orders": orders,
                "total_spent": float(spent or 0.0),
                "total_count": int(count or 0),
            }
        finally:
            session.close()

    def create(self, **fields) -> Customer:
        session = SessionLocal()
        try:
            customer = Customer(**fields)
            session.add(customer)
            session.commit()
            session.refresh(customer)
            return customer
        except IntegrityError:
            session.rollback()
            raise ConflictError("Un client avec ce numéro existe déjà")
        except SQLAlchemyError as e:
            logger.error(f"❌ Error creating customer: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def update(self, customer_id: int, **fields) -> Customer:
        session = SessionLocal()
        try:
            customer = session.get(Customer, customer_id)
            if customer is None:
                raise NotFoundError("Client introuvable")
            for key, value in fields.items():
                setattr(customer, key, value)
            session.commit()
            session.refresh(customer)
            return customer
        except IntegrityError:
            session.rollback()
            raise ConflictError("Un client avec ce numéro existe déjà")
        except SQLAlchemyError as e:
            logger.error(f"❌ Error updating customer #{customer_id}: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def delete(self, customer_id: int) -> None:
        """Orders survive: they carry their own customer snapshot."""
        session = SessionLocal()
        try:
            customer = session.get(Customer, customer_id)
            if customer is None:
                raise NotFoundError("Client introuvable")
            session.query(Order).filter(Order.customer_id == customer_id).update(
                {Order.customer_id: None}, synchronize_session=False
            )
            session.delete(customer)
            session.commit()
        except SQLAlchemyError as e:
            logger.error(f"❌ Error deleting customer #{customer_id}: {e}")
            session.rollback()
            raise
        finally:
            session.close()
