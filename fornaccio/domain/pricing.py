from dataclasses import dataclass, field
from typing import Iterable, List, Mapping

from fornaccio.domain.errors import InvalidOrderError

MAX_QUANTITY = 50


@dataclass
class PricedLine:
    pizza_id: str
    pizza_name: str
    base_price: float
    unit_price: float
    quantity: int
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


def _dedupe(ids: Iterable[str]) -> List[str]:
    seen = []
    for ingredient_id in ids or []:
        if ingredient_id not in seen:
            seen.append(ingredient_id)
    return seen


def price_line(pizza, ingredients: Mapping[str, object], added: Iterable[str] = (),
               removed: Iterable[str] = (), quantity: int = 1, include_unavailable: bool = False) -> PricedLine:
    """
    Base price plus every added extra. Removing a default topping is free and
    never lowers the price.

    `ingredients` maps ingredient id -> Ingredient row for the whole catalog.
    `include_unavailable` lets the counter sell a pizza that is hidden from the menu.
    """
    if pizza is None:
        raise InvalidOrderError("Pizza introuvable")
    if not pizza.is_available and not include_unavailable:
        raise InvalidOrderError(f"{pizza.name} n'est plus disponible")
    if quantity < 1 or quantity > MAX_QUANTITY:
        raise InvalidOrderError(f"Quantité invalide: {quantity}")

    added = _dedupe(added)
    removed = _dedupe(removed)
    defaults = set(pizza.ingredients or [])

    both = set(added) & set(removed)
    if both:
        raise InvalidOrderError(f"Ingrédient à la fois ajouté et retiré: {', '.join(sorted(both))}")

    for ingredient_id in removed:
        if ingredient_id not in defaults:
            raise InvalidOrderError(f"{ingredient_id} ne fait pas partie de la {pizza.name}")

    extras = 0.0
    for ingredient_id in added:
        ingredient = ingredients.get(ingredient_id)
        if ingredient is None or not ingredient.is_available:
            raise InvalidOrderError(f"Ingrédient indisponible: {ingredient_id}")
        if ingredient_id in defaults:
            raise InvalidOrderError(f"{ingredient.name} est déjà sur la {pizza.name}")
        extras += ingredient.price

    return PricedLine(
        pizza_id=pizza.id,
        pizza_name=pizza.name,
        base_price=pizza.base_price,
        unit_price=round(pizza.base_price + extras, 2),
        quantity=quantity,
        added=added,
        removed=removed,
    )


def order_total(lines: Iterable[PricedLine]) -> float:
    return round(sum(line.line_total for line in lines), 2)
