from typing import List

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from fornaccio.core.config import settings
from fornaccio.core.templating import templates
from fornaccio.domain.schemas import DriverLocation, OrderOut

router = APIRouter()


@router.get("/driver", response_class=HTMLResponse)
def driver_page(request: Request):
    return templates.TemplateResponse(request, "driver.html", {
        "orders": request.app.state.tracking_service.driver_orders(),
        "maps_api_key": settings.GOOGLE_MAPS_API_KEY,
    })


@router.get("/api/driver/orders", response_model=List[OrderOut])
def driver_orders(request: Request):
    return request.app.state.tracking_service.driver_orders()


@router.post("/api/driver/orders/{order_id}/location", response_model=OrderOut)
def post_location(order_id: int, payload: DriverLocation, request: Request):
    return request.app.state.tracking_service.update_driver_location(order_id, payload.lat, payload.lng)
