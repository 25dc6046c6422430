from urllib.parse import urlparse

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from fornaccio.application.ordering import LOCAL_HOSTS
from fornaccio.core.config import settings
from fornaccio.core.templating import templates
from fornaccio.domain.errors import NotFoundError
from fornaccio.domain.schemas import (
    CheckoutRequest,
    CreatePaymentRequest,
    CreatePaymentResponse,
    OrderCreated,
    OrderTracking,
)

router = APIRouter()


def resolve_base_url(request: Request) -> str:
    """PUBLIC_BASE_URL when configured, otherwise rebuilt from the Host header."""
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    host = request.headers.get("host") or "localhost:8000"
    protocol = "http" if urlparse(f"//{host}").hostname in LOCAL_HOSTS else "https"
    return f"{protocol}://{host}"


@router.post("/api/orders", response_model=OrderCreated, status_code=201)
def submit_order(payload: CheckoutRequest, request: Request):
    order = request.app.state.order_service.submit_order(payload.customer, payload.items)
    return OrderCreated(order_id=order.id, total=order.total)


@router.post("/api/create-payment", response_model=CreatePaymentResponse)
def create_payment(payload: CreatePaymentRequest, request: Request):
    checkout_url = request.app.state.order_service.create_payment(payload.order_id, resolve_base_url(request))
    return CreatePaymentResponse(checkout_url=checkout_url)


@router.get("/api/orders/{order_id}", response_model=OrderTracking)
def get_order_status(order_id: int, request: Request):
    return request.app.state.order_service.get_tracking(order_id)


@router.get("/order/{order_id}/status", response_class=HTMLResponse)
def order_status_page(order_id: int, request: Request):
    try:
        tracking = request.app.state.order_service.get_tracking(order_id)
    except NotFoundError:
        return templates.TemplateResponse(request, "order_not_found.html", {"order_id": order_id}, status_code=404)
    return templates.TemplateResponse(request, "order_status.html", {
        "order": tracking,
        "maps_api_key": settings.GOOGLE_MAPS_API_KEY,
        "restaurant_address": settings.RESTAURANT_ADDRESS,
    })
