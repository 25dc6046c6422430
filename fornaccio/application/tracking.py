import logging

from fornaccio.domain.errors import InvalidOrderError, NotFoundError
from fornaccio.domain.status import ACTIVE_DELIVERY_STATUSES

logger = logging.getLogger(__name__)


class TrackingService:
    """Driver deliveries and live coordinates."""

    def __init__(self, order_repo):
        self.order_repo = order_repo

    def driver_orders(self) -> list:
        return self.order_repo.list_by_status(ACTIVE_DELIVERY_STATUSES, newest_first=True)

    def update_driver_location(self, order_id: int, lat: float, lng: float):
        if self.order_repo.get_order(order_id) is None:
            raise NotFoundError("Commande introuvable")
        return self.order_repo.set_driver_location(order_id, lat, lng)

    def ingest_beacon(self, device_id: str | None, lat: float | None, lon: float | None) -> int:
        """
        One GPS fix from the tracker app. There is a single delivery vehicle,
        so the fix is applied to every order currently out for delivery.
        """
        # Zero is what the tracker sends before it has a fix.
        if not device_id or not lat or not lon:
            raise InvalidOrderError("Missing params")
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            raise InvalidOrderError("Invalid coordinates")

        count = self.order_repo.set_driver_location_for_statuses(ACTIVE_DELIVERY_STATUSES, lat, lon)
        logger.info(f"📍 [Traccar] {device_id}: {lat}, {lon} -> {count} active orders")
        return count
