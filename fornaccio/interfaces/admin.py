import logging
import re
from typing import List

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse

from fornaccio.application.ordering import BOARD_TITLES
from fornaccio.application.stats import compute_admin_stats
from fornaccio.core.security import is_admin, require_admin
from fornaccio.core.templating import templates
from fornaccio.domain.errors import InvalidOrderError, NotFoundError
from fornaccio.domain.phone import normalize_phone
from fornaccio.domain.schemas import (
    AdminStats,
    BoardColumn,
    BoardOut,
    CustomerDetails,
    CustomerIn,
    CustomerOut,
    CustomerWithOrders,
    IngredientIn,
    IngredientOut,
    ManualOrderRequest,
    OrderOut,
    PizzaIn,
    PizzaOut,
    StatusUpdateRequest,
    UploadOut,
)
from fornaccio.infrastructure.uploads import save_upload

logger = logging.getLogger(__name__)

# HTML page: redirects to /login instead of answering 401.
pages = APIRouter()
router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])

MIN_SEARCH_LENGTH = 2


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    if not slug:
        raise InvalidOrderError("Nom invalide")
    return slug


def _board(request: Request) -> BoardOut:
    state = request.app.state
    grouped = state.order_service.board()
    columns = [
        BoardColumn(id=column, title=BOARD_TITLES[column], orders=[OrderOut.model_validate(o) for o in orders])
        for column, orders in grouped.items()
    ]
    return BoardOut(columns=columns, stats=compute_admin_stats(state.order_repo))


@pages.get("/admin", response_class=HTMLResponse)
def admin_page(request: Request):
    if not is_admin(request):
        return RedirectResponse("/login", status_code=303)
    return templates.TemplateResponse(request, "admin_board.html", {"board": _board(request)})


# ===================== Orders =====================

@router.get("/board", response_model=BoardOut)
def get_board(request: Request):
    return _board(request)


@router.get("/stats", response_model=AdminStats)
def get_stats(request: Request):
    return compute_admin_stats(request.app.state.order_repo)


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: StatusUpdateRequest, request: Request):
    return request.app.state.order_service.update_status(order_id, payload.status, force=payload.force)


@router.post("/orders", response_model=OrderOut, status_code=201)
def create_manual_order(payload: ManualOrderRequest, request: Request):
    return request.app.state.order_service.create_manual_order(payload)


@router.put("/orders/{order_id}", response_model=OrderOut)
def update_manual_order(order_id: int, payload: ManualOrderRequest, request: Request):
    return request.app.state.order_service.update_manual_order(order_id, payload)


# ===================== Customers =====================

@router.get("/customers", response_model=List[CustomerWithOrders])
def list_customers(request: Request):
    customers = request.app.state.customer_repo.list_with_orders()
    result = []
    for customer in customers:
        entry = CustomerWithOrders.model_validate(customer)
        entry.order_count = len(entry.orders)
        result.append(entry)
    return result


@router.get("/customers/search", response_model=List[CustomerOut])
def search_customers(q: str, request: Request):
    query = q.strip()
    if len(query) < MIN_SEARCH_LENGTH:
        return []
    return request.app.state.customer_repo.search(query)


@router.get("/customers/by-phone/{phone}", response_model=CustomerDetails)
def customer_details(phone: str, request: Request):
    details = request.app.state.customer_repo.details_by_phone(normalize_phone(phone))
    if details is None:
        raise NotFoundError("Client introuvable")
    # Built from the flat customer fields: the relationship itself is not loaded here.
    return CustomerDetails(
        **CustomerOut.model_validate(details["customer"]).model_dump(),
        orders=[OrderOut.model_validate(o) for o in details["orders"]],
        total_spent=round(details["total_spent"], 2),
        total_count=details["total_count"],
    )


@router.post("/customers", response_model=CustomerOut, status_code=201)
def create_customer(payload: CustomerIn, request: Request):
    fields = payload.model_dump()
    fields["phone"] = normalize_phone(payload.phone)
    return request.app.state.customer_repo.create(**fields)


@router.put("/customers/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: int, payload: CustomerIn, request: Request):
    fields = payload.model_dump()
    fields["phone"] = normalize_phone(payload.phone)
    return request.app.state.customer_repo.update(customer_id, **fields)


@router.delete("/customers/{customer_id}")
def delete_customer(customer_id: int, request: Request):
    request.app.state.customer_repo.delete(customer_id)
    return {"deleted": True}


# ===================== Pizzas =====================

def _check_ingredients(request: Request, ingredient_ids: List[str]) -> List[str]:
    known = request.app.state.catalog_repo.ingredients_by_id()
    unknown = [i for i in ingredient_ids if i not in known]
    if unknown:
        raise InvalidOrderError(f"Ingrédients inconnus: {', '.join(unknown)}")
    return list(dict.fromkeys(ingredient_ids))


@router.get("/pizzas", response_model=List[PizzaOut])
def list_pizzas(request: Request):
    return request.app.state.catalog_repo.list_pizzas()


@router.post("/pizzas", response_model=PizzaOut, status_code=201)
def create_pizza(payload: PizzaIn, request: Request):
    slug = slugify(payload.slug or payload.name)
    fields = payload.model_dump(exclude={"slug"})
    fields["ingredients"] = _check_ingredients(request, payload.ingredients)
    return request.app.state.catalog_repo.create_pizza(id=slug, slug=slug, **fields)


@router.put("/pizzas/{pizza_id}", response_model=PizzaOut)
def update_pizza(pizza_id: str, payload: PizzaIn, request: Request):
    fields = payload.model_dump(exclude={"slug"})
    fields["ingredients"] = _check_ingredients(request, payload.ingredients)
    if payload.slug:
        fields["slug"] = slugify(payload.slug)
    return request.app.state.catalog_repo.update_pizza(pizza_id, **fields)


@router.delete("/pizzas/{pizza_id}")
def delete_pizza(pizza_id: str, request: Request):
    request.app.state.catalog_repo.delete_pizza(pizza_id)
    return {"deleted": True}


# ===================== Ingredients =====================

@router.get("/ingredients", response_model=List[IngredientOut])
def list_all_ingredients(request: Request):
    return request.app.state.catalog_repo.list_ingredients()


@router.post("/ingredients", response_model=IngredientOut, status_code=201)
def create_ingredient(payload: IngredientIn, request: Request):
    fields = payload.model_dump(exclude={"id"})
    return request.app.state.catalog_repo.create_ingredient(id=slugify(payload.id or payload.name), **fields)


@router.put("/ingredients/{ingredient_id}", response_model=IngredientOut)
def update_ingredient(ingredient_id: str, payload: IngredientIn, request: Request):
    fields = payload.model_dump(exclude={"id"})
    return request.app.state.catalog_repo.update_ingredient(ingredient_id, **fields)


@router.delete("/ingredients/{ingredient_id}")
def delete_ingredient(ingredient_id: str, request: Request):
    request.app.state.catalog_repo.delete_ingredient(ingredient_id)
    return {"deleted": True}


# ===================== Uploads =====================

@router.post("/uploads", response_model=UploadOut, status_code=201)
async def upload_image(file: UploadFile = File(...)):
    data = await file.read()
    return UploadOut(url=save_upload(file.filename, file.content_type, data))
