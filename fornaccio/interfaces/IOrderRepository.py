from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from fornaccio.domain.pricing import PricedLine
from fornaccio.domain.status import OrderStatus


class IOrderRepository(ABC):
    @abstractmethod
    def create_order(self, snapshot: dict, lines: List[PricedLine], customer_id: Optional[int]):
        pass

    @abstractmethod
    def replace_order(self, order_id: int, snapshot: dict, lines: List[PricedLine], customer_id: Optional[int]):
        pass

    @abstractmethod
    def get_order(self, order_id: int):
        pass

    @abstractmethod
    def set_payment_id(self, order_id: int, payment_id: str):
        pass

    @abstractmethod
    def set_status(self, order_id: int, status: OrderStatus):
        pass

    @abstractmethod
    def transition_status(self, order_id: int, expected: OrderStatus, status: OrderStatus) -> int:
        pass

    @abstractmethod
    def list_by_status(self, statuses: Iterable[OrderStatus], newest_first: bool = False) -> list:
        pass

    @abstractmethod
    def list_pending_payments(self, created_after: datetime) -> list:
        pass

    @abstractmethod
    def set_driver_location(self, order_id: int, lat: float, lng: float):
        pass

    @abstractmethod
    def set_driver_location_for_statuses(self, statuses: Iterable[OrderStatus], lat: float, lng: float) -> int:
        pass
