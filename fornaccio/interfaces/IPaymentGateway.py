from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PaymentSession:
    id: str
    status: str  # provider vocabulary: open, pending, paid, canceled, expired, failed
    checkout_url: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    @property
    def order_id(self) -> Optional[int]:
        raw = self.metadata.get("order_id")
        try:
            return int(raw) if raw is not None else None
        except (TypeError, ValueError):
            return None


class IPaymentGateway(ABC):
    @abstractmethod
    def create_payment(self, amount: float, description: str, redirect_url: str,
                       webhook_url: Optional[str], metadata: dict) -> PaymentSession:
        pass

    @abstractmethod
    def get_payment(self, payment_id: str) -> PaymentSession:
        pass
