import logging
from typing import Optional

from mollie.api.client import Client
from mollie.api.error import Error as MollieError

from fornaccio.core.config import settings
from fornaccio.domain.errors import PaymentProviderError
from fornaccio.interfaces.IPaymentGateway import IPaymentGateway, PaymentSession

logger = logging.getLogger(__name__)


class MolliePaymentGateway(IPaymentGateway):
    def __init__(self, api_key: Optional[str] = None, currency: Optional[str] = None):
        self.api_key = api_key or settings.MOLLIE_API_KEY
        self.currency = currency or settings.CURRENCY
        self._client = None

        if not self.api_key:
            logger.warning("⚠️ MolliePaymentGateway: MOLLIE_API_KEY missing. Online payments disabled.")

    @property
    def client(self) -> Client:
        # Built lazily: the SDK validates the key format on set_api_key.
        if self._client is None:
            if not self.api_key:
                raise PaymentProviderError("Paiement en ligne indisponible")
            client = Client()
            client.set_api_key(self.api_key)
            self._client = client
        return self._client

    def create_payment(self, amount: float, description: str, redirect_url: str,
                       webhook_url: Optional[str], metadata: dict) -> PaymentSession:
        payload = {
            "amount": {"currency": self.currency, "value": f"{amount:.2f}"},
            "description": description,
            "redirectUrl": redirect_url,
            "metadata": metadata,
        }
        # Mollie rejects webhook URLs it cannot reach (e.g. localhost).
        if webhook_url:
            payload["webhookUrl"] = webhook_url

        try:
            payment = self.client.payments.create(payload)
        except MollieError as e:
            logger.error(f"❌ Mollie Create Payment Error: {e}")
            raise PaymentProviderError("Création du paiement impossible") from e

        logger.info(f"💳 Mollie payment {payment.id} created ({payload['amount']['value']} {self.currency})")
        return self._to_session(payment)

    def get_payment(self, payment_id: str) -> PaymentSession:
        try:
            payment = self.client.payments.get(payment_id)
        except MollieError as e:
            logger.error(f"❌ Mollie Get Payment Error ({payment_id}): {e}")
            raise PaymentProviderError("Vérification du paiement impossible") from e
        return self._to_session(payment)

    @staticmethod
    def _to_session(payment) -> PaymentSession:
        return PaymentSession(
            id=payment.id,
            status=payment.status,
            checkout_url=payment.checkout_url,
            metadata=dict(payment.metadata or {}),
        )
