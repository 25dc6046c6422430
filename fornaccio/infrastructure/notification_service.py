import logging

import requests
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from fornaccio.core.config import settings

logger = logging.getLogger(__name__)

class NotificationService:
    """SMS notices for customers and the shop. Best effort: failures are logged, never raised."""

    def __init__(self):
        self.client = None
        self.enabled = False

        # Only initialize if credentials exist in .env
        if settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_FROM_NUMBER:
            try:
                self.client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
                self.enabled = True
                logger.info("✅ NotificationService: Twilio Client Initialized")
            except TwilioException as e:
                logger.error(f"❌ Failed to initialize Twilio Client: {e}")
        else:
            logger.warning("⚠️ NotificationService: Credentials missing in .env. Notifications disabled.")

    def send_order_confirmation(self, order) -> bool:
        """Replaces the e-mail confirmation: tells the customer their payment went through."""
        message_body = (
            f"Il Fornaccio: merci {order.customer_name} ! "
            f"Votre commande #{order.id} ({order.total:.2f}€) est confirmée. "
            f"Votre pizza arrive..."
        )
        return self._send(order.customer_phone, message_body)

    def notify_admin_new_order(self, order) -> bool:
        """Sends an SMS to the shop phone when a paid order lands on the board."""
        if not settings.ADMIN_PHONE_NUMBER:
            logger.debug("Admin number missing, skipping new-order notice.")
            return False

        # Format the message
        order_summary = "\n".join([f"- {item.quantity}x {item.pizza_name}" for item in order.items])
        message_body = (
            f"🔔 NOUVELLE COMMANDE #{order.id}\n"
            f"👤 {order.customer_name} ({order.customer_phone})\n"
            f"🛒\n{order_summary}\n"
            f"💶 {order.total:.2f}€"
        )
        return self._send(settings.ADMIN_PHONE_NUMBER, message_body)

    def _send(self, to_number: str, body: str) -> bool:
        if not self.enabled:
            logger.info(f"📵 Notification skipped (disabled) for {to_number}")
            return False
        try:
            self.client.messages.create(from_=settings.TWILIO_FROM_NUMBER, body=body, to=to_number)
            logger.info(f"✅ Notification sent to {to_number}")
            return True
        except (TwilioException, requests.RequestException) as e:
            logger.error(f"❌ Failed to send notification to {to_number}: {e}")
            return False
