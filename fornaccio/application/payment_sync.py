import asyncio
import logging
from datetime import datetime, timedelta, timezone

from fornaccio.domain.errors import FornaccioError

logger = logging.getLogger(__name__)


class PaymentSyncWorker:
    """
    Periodically re-checks PENDING orders that already have a payment.
    Covers customers who close the tab before the redirect and webhooks
    that never reach a local deployment.
    """

    def __init__(self, order_service, interval_seconds: int, window_minutes: int):
        self.order_service = order_service
        self.interval_seconds = interval_seconds
        self.window_minutes = window_minutes
        self._task: asyncio.Task | None = None

    @property
    def enabled(self) -> bool:
        return self.interval_seconds > 0

    def start(self) -> None:
        if not self.enabled:
            logger.info("Payment sync disabled.")
            return
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run(), name="payment-sync")
            logger.info(f"🔁 Payment sync started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("🛑 Payment sync stopped.")

    def sync_once(self) -> int:
        """Validates every recent pending payment. Returns how many orders changed status."""
        since = datetime.now(timezone.utc) - timedelta(minutes=self.window_minutes)
        changed = 0
        for order in self.order_service.order_repo.list_pending_payments(created_after=since):
            try:
                _, status = self.order_service.validate_payment(order.id)
            except FornaccioError as e:
                logger.warning(f"⚠️ Payment sync failed for order #{order.id}: {e.message}")
                continue
            if status != order.status:
                changed += 1
        return changed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                changed = await asyncio.to_thread(self.sync_once)
                if changed:
                    logger.info(f"🔁 Payment sync updated {changed} orders")
            except Exception:
                # Keep the loop alive; the next tick retries.
                logger.exception("❌ Payment sync iteration failed")
