import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from fornaccio.domain.errors import InvalidOrderError

router = APIRouter()
logger = logging.getLogger(__name__)


def _as_float(value: str | None) -> float | None:
    try:
        return float(value) if value not in (None, "") else None
    except ValueError:
        return None


@router.api_route("/api/tracking/traccar", methods=["GET", "POST"], response_class=PlainTextResponse)
def traccar_webhook(request: Request):
    """
    Traccar Client (OsmAnd protocol): ?id=<device>&lat=..&lon=..&timestamp=..
    The client sends the same query string for GET and POST.
    """
    params = request.query_params
    device_id = params.get("id")
    lat = _as_float(params.get("lat"))
    lon = _as_float(params.get("lon"))
    logger.debug(f"[Traccar] INCOMING REQUEST: ID={device_id} LAT={lat} LON={lon}")

    try:
        request.app.state.tracking_service.ingest_beacon(device_id, lat, lon)
    except InvalidOrderError as e:
        return PlainTextResponse(e.message, status_code=400)
    return PlainTextResponse("OK")
