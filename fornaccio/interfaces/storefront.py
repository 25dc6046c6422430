from typing import List

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from fornaccio.core.templating import templates
from fornaccio.domain.errors import NotFoundError
from fornaccio.domain.schemas import CartLineIn, IngredientOut, MenuPizza, QuoteOut

router = APIRouter()


def build_menu(catalog_repo) -> List[MenuPizza]:
    ingredients = catalog_repo.ingredients_by_id()
    menu = []
    for pizza in catalog_repo.list_pizzas(available_only=True):
        entry = MenuPizza.model_validate(pizza)
        entry.default_ingredients = [
            IngredientOut.model_validate(ingredients[i]) for i in pizza.ingredients if i in ingredients
        ]
        menu.append(entry)
    return menu


@router.get("/", response_class=HTMLResponse)
def menu_page(request: Request):
    catalog_repo = request.app.state.catalog_repo
    return templates.TemplateResponse(request, "menu.html", {
        "pizzas": build_menu(catalog_repo),
        "extras": catalog_repo.list_ingredients(available_only=True),
    })


@router.get("/api/menu", response_model=List[MenuPizza])
def list_menu(request: Request):
    return build_menu(request.app.state.catalog_repo)


@router.get("/api/ingredients", response_model=List[IngredientOut])
def list_ingredients(request: Request):
    return request.app.state.catalog_repo.list_ingredients(available_only=True)


@router.get("/api/pizzas/{slug}", response_model=MenuPizza)
def get_pizza(slug: str, request: Request):
    for pizza in build_menu(request.app.state.catalog_repo):
        if pizza.slug == slug:
            return pizza
    raise NotFoundError("Pizza introuvable")


@router.post("/api/quote", response_model=QuoteOut)
def quote(payload: CartLineIn, request: Request):
    """Prices a customization for the pizza builder without touching the cart."""
    priced = request.app.state.order_service.quote(payload)
    return QuoteOut(
        pizza_id=priced.pizza_id,
        name=priced.pizza_name,
        base_price=priced.base_price,
        unit_price=priced.unit_price,
        quantity=priced.quantity,
        total_price=priced.line_total,
    )
