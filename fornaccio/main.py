import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from fornaccio.core.config import settings
from fornaccio.core.logging_config import configure_logging
from fornaccio.core.templating import PACKAGE_DIR

# 1. Infrastructure & Domain Imports
from fornaccio.domain.errors import FornaccioError
from fornaccio.infrastructure.cart_store import CartStore
from fornaccio.infrastructure.database import init_db
from fornaccio.infrastructure.mollie_service import MolliePaymentGateway
from fornaccio.infrastructure.notification_service import NotificationService
from fornaccio.infrastructure.repositories.catalog_repository import SqlCatalogRepository
from fornaccio.infrastructure.repositories.customer_repository import SqlCustomerRepository
from fornaccio.infrastructure.repositories.order_repository import SqlOrderRepository
from fornaccio.infrastructure.uploads import DEFAULT_UPLOAD_DIR
from fornaccio.application.ordering import OrderService
from fornaccio.application.payment_sync import PaymentSyncWorker
from fornaccio.application.tracking import TrackingService
from fornaccio.interfaces import (
    admin,
    auth,
    cart,
    checkout,
    driver,
    mollie_webhook,
    storefront,
    traccar_webhook,
)

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.db_ready = init_db()
    app.state.payment_sync.start()
    yield
    await app.state.payment_sync.stop()


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# ---------------------------------------------------------
# COMPOSITION ROOT
# ---------------------------------------------------------
app.state.db_ready = False
app.state.order_repo = SqlOrderRepository()
app.state.catalog_repo = SqlCatalogRepository()
app.state.customer_repo = SqlCustomerRepository()
app.state.cart_store = CartStore()
app.state.order_service = OrderService(
    order_repo=app.state.order_repo,
    catalog_repo=app.state.catalog_repo,
    customer_repo=app.state.customer_repo,
    payment_gateway=MolliePaymentGateway(),
    notifier=NotificationService(),
)
app.state.tracking_service = TrackingService(order_repo=app.state.order_repo)
app.state.payment_sync = PaymentSyncWorker(
    app.state.order_service,
    interval_seconds=settings.PAYMENT_SYNC_INTERVAL_SECONDS,
    window_minutes=settings.PAYMENT_SYNC_WINDOW_MINUTES,
)


@app.exception_handler(FornaccioError)
async def domain_error_handler(request: Request, exc: FornaccioError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
    return JSONResponse({"success": False, "error": exc.message}, status_code=exc.status_code)


# Include Routers
app.include_router(storefront.router)
app.include_router(cart.router)
app.include_router(checkout.router)
app.include_router(mollie_webhook.router)
app.include_router(traccar_webhook.router)
app.include_router(driver.router)
app.include_router(auth.router)
app.include_router(admin.pages)
app.include_router(admin.router)

# Uploads first so a custom UPLOAD_DIR shadows the bundled static folder.
upload_dir_path = Path(settings.UPLOAD_DIR or DEFAULT_UPLOAD_DIR)
upload_dir_path.mkdir(parents=True, exist_ok=True)
app.mount("/static/uploads", StaticFiles(directory=str(upload_dir_path)), name="uploads")
app.mount("/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")


@app.get("/health")
def health_check():
    status = "active" if app.state.db_ready else "degraded"
    return {"status": status, "system": settings.PROJECT_NAME}
