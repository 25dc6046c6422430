import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from fornaccio.domain.errors import ConflictError, NotFoundError
from fornaccio.domain.models import Ingredient, Pizza
from fornaccio.infrastructure.database import SessionLocal

logger = logging.getLogger(__name__)


class SqlCatalogRepository:
    """Pizzas and ingredients. Order history never references these rows."""

    # --- Pizzas ---

    def list_pizzas(self, available_only: bool = False) -> List[Pizza]:
        session = SessionLocal()
        try:
            query = session.query(Pizza)
            if available_only:
                query = query.filter(Pizza.is_available.is_(True))
            return query.order_by(Pizza.name).all()
        finally:
            session.close()

    def get_pizza(self, pizza_id: str) -> Optional[Pizza]:
        session = SessionLocal()
        try:
            return session.get(Pizza, pizza_id)
        finally:
            session.close()

    def get_pizza_by_slug(self, slug: str) -> Optional[Pizza]:
        session = SessionLocal()
        try:
            return session.query(Pizza).filter(Pizza.slug == slug).first()
        finally:
            session.close()

    def pizzas_by_id(self) -> Dict[str, Pizza]:
        return {pizza.id: pizza for pizza in self.list_pizzas()}

    def create_pizza(self, **fields) -> Pizza:
        return self._create(Pizza(**fields), "Une pizza avec cet identifiant existe déjà")

    def update_pizza(self, pizza_id: str, **fields) -> Pizza:
        return self._update(Pizza, pizza_id, "Pizza introuvable", fields)

    def delete_pizza(self, pizza_id: str) -> None:
        self._delete(Pizza, pizza_id, "Pizza introuvable")

    # --- Ingredients ---

    def list_ingredients(self, available_only: bool = False) -> List[Ingredient]:
        session = SessionLocal()
        try:
            query = session.query(Ingredient)
            if available_only:
                query = query.filter(Ingredient.is_available.is_(True))
            return query.order_by(Ingredient.category, Ingredient.name).all()
        finally:
            session.close()

    def ingredients_by_id(self) -> Dict[str, Ingredient]:
        return {ingredient.id: ingredient for ingredient in self.list_ingredients()}

    def create_ingredient(self, **fields) -> Ingredient:
        return self._create(Ingredient(**fields), "Un ingrédient avec cet identifiant existe déjà")

    def update_ingredient(self, ingredient_id: str, **fields) -> Ingredient:
        return self._update(Ingredient, ingredient_id, "Ingrédient introuvable", fields)

    def delete_ingredient(self, ingredient_id: str) -> None:
        self._delete(Ingredient, ingredient_id, "Ingrédient introuvable")

    # --- Seeding ---

    def upsert(self, model, key: str, **fields):
        session = SessionLocal()
        try:
            row = session.get(model, key)
            if row is None:
                row = model(id=key, **fields)
                session.add(row)
            else:
                for name, value in fields.items():
                    setattr(row, name, value)
            session.commit()
            return row
        except SQLAlchemyError as e:
            logger.error(f"❌ Error upserting {model.__name__} {key}: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    # --- Helpers ---

    def _create(self, row, conflict_message: str):
        session = SessionLocal()
        try:
            session.add(row)
            session.commit()
            return row
        except IntegrityError:
            session.rollback()
            raise ConflictError(conflict_message)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error creating {type(row).__name__}: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def _update(self, model, key: str, missing_message: str, fields: dict):
        session = SessionLocal()
        try:
            row = session.get(model, key)
            if row is None:
                raise NotFoundError(missing_message)
            for name, value in fields.items():
                setattr(row, name, value)
            session.commit()
            return row
        except IntegrityError:
            session.rollback()
            raise ConflictError(f"{model.__name__} en conflit avec un autre élément")
        except SQLAlchemyError as e:
            logger.error(f"❌ Error updating {model.__name__} {key}: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def _delete(self, model, key: str, missing_message: str) -> None:
        session = SessionLocal()
        try:
            row = session.get(model, key)
            if row is None:
                raise NotFoundError(missing_message)
            session.delete(row)
            session.commit()
        except SQLAlchemyError as e:
            logger.error(f"❌ Error deleting {model.__name__} {key}: {e}")
            session.rollback()
            raise
        finally:
            session.close()
