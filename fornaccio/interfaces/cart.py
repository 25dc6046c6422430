import logging

from fastapi import APIRouter, Request, Response

from fornaccio.core.config import settings
from fornaccio.domain.errors import InvalidOrderError
from fornaccio.domain.schemas import CartCheckoutRequest, CartLineIn, CartOut, OrderCreated
from fornaccio.infrastructure.cart_store import CART_COOKIE

router = APIRouter(prefix="/api/cart", tags=["cart"])
logger = logging.getLogger(__name__)


def _cart_id(request: Request, response: Response) -> str:
    """Reuses the visitor's cart cookie or issues a new one."""
    cart_id = request.cookies.get(CART_COOKIE)
    if not cart_id:
        cart_id = request.app.state.cart_store.new_cart_id()
    response.set_cookie(
        CART_COOKIE, cart_id, max_age=settings.CART_TTL_SECONDS, httponly=True, samesite="lax"
    )
    return cart_id


@router.get("", response_model=CartOut)
def get_cart(request: Request, response: Response):
    return request.app.state.cart_store.get_cart(_cart_id(request, response))


@router.post("/items", response_model=CartOut, status_code=201)
def add_item(payload: CartLineIn, request: Request, response: Response):
    priced = request.app.state.order_service.quote(payload)
    return request.app.state.cart_store.add_line(_cart_id(request, response), priced)


@router.delete("/items/{line_id}", response_model=CartOut)
def remove_item(line_id: str, request: Request, response: Response):
    return request.app.state.cart_store.remove_line(_cart_id(request, response), line_id)


@router.delete("", response_model=CartOut)
def clear_cart(request: Request, response: Response):
    cart_store = request.app.state.cart_store
    cart_store.clear(_cart_id(request, response))
    return CartOut()


@router.post("/checkout", response_model=OrderCreated, status_code=201)
def checkout_cart(payload: CartCheckoutRequest, request: Request, response: Response):
    """Turns the visitor's cart into a PENDING order, then empties the cart."""
    cart_store = request.app.state.cart_store
    cart_id = _cart_id(request, response)
    cart = cart_store.get_cart(cart_id)
    if not cart.items:
        raise InvalidOrderError("Le panier est vide")

    # Lines are re-priced against the live catalog; stored totals are only a preview.
    items = [
        CartLineIn(pizza_id=line.pizza_id, added=line.added, removed=line.removed, quantity=line.quantity)
        for line in cart.items
    ]
    order = request.app.state.order_service.submit_order(payload.customer, items)
    cart_store.clear(cart_id)
    return OrderCreated(order_id=order.id, total=order.total)
