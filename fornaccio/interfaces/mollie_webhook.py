from fastapi import APIRouter, Form, Request
from fastapi.responses import JSONResponse
import logging

from fornaccio.domain.errors import FornaccioError

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/api/webhooks/mollie")
def mollie_webhook(request: Request, id: str | None = Form(None)):
    """
    Mollie posts only the payment id (form-urlencoded). The real status is
    fetched back from Mollie, so the body itself is never trusted.
    Any failure answers 500 so Mollie retries later.
    """
    if not id:
        return JSONResponse({"error": "No payment ID provided"}, status_code=400)

    logger.info(f"📨 Mollie Webhook: payment={id}")
    order_service = request.app.state.order_service

    try:
        order = order_service.handle_payment_webhook(id)
    except FornaccioError as e:
        logger.error(f"❌ Mollie Webhook Error: {e.message}")
        return JSONResponse({"error": "Webhook failed"}, status_code=500)
    except Exception as e:
        logger.error(f"❌ Mollie Webhook Error: {e}", exc_info=True)
        return JSONResponse({"error": "Webhook failed"}, status_code=500)

    if order is not None:
        logger.info(f"✅ Order #{order.id} is now {order.status}")
    return {"received": True}
