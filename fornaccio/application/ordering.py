import logging
from typing import Iterable, List
from urllib.parse import urlparse

from fornaccio.domain.errors import (
    InvalidOrderError,
    InvalidTransitionError,
    NotFoundError,
    PaymentProviderError,
)
from fornaccio.domain.phone import normalize_phone, split_full_name
from fornaccio.domain.pricing import PricedLine, price_line
from fornaccio.domain.schemas import (
    CartLineIn,
    CheckoutForm,
    ManualOrderRequest,
    OrderItemOut,
    OrderTracking,
)
from fornaccio.domain.status import (
    BOARD_COLUMNS,
    BOARD_STATUSES,
    OrderStatus,
    ensure_transition,
    is_advanced,
    normalize_status,
    tracking_stage,
)
from fornaccio.interfaces.IOrderRepository import IOrderRepository
from fornaccio.interfaces.IPaymentGateway import IPaymentGateway, PaymentSession

logger = logging.getLogger(__name__)

# --- CONFIG ---
PAYMENT_FAILED_STATUSES = {"canceled", "expired", "failed"}
BOARD_TITLES = {
    OrderStatus.PENDING: "Nouvelles",
    OrderStatus.PREPARING: "Au Four",
    OrderStatus.READY: "Prêt / Livraison",
}
TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
LOCAL_HOSTS = ("localhost", "127.0.0.1")


class OrderService:
    """
    Checkout, payment and admin order handling.
    Every status change goes through `normalize_status` and the transition table.
    """

    def __init__(self, order_repo: IOrderRepository, catalog_repo, customer_repo,
                 payment_gateway: IPaymentGateway, notifier):
        self.order_repo = order_repo
        self.catalog_repo = catalog_repo
        self.customer_repo = customer_repo
        self.payment_gateway = payment_gateway
        self.notifier = notifier  # Injected NotificationService

    # --- PRICING ---

    def price_items(self, items: Iterable[CartLineIn], skip_unknown: bool = False,
                    include_unavailable: bool = False) -> List[PricedLine]:
        pizzas = self.catalog_repo.pizzas_by_id()
        ingredients = self.catalog_repo.ingredients_by_id()

        lines = []
        for item in items:
            pizza = pizzas.get(item.pizza_id)
            if pizza is None and skip_unknown:
                logger.warning(f"⚠️ Unknown pizza {item.pizza_id!r} skipped")
                continue
            lines.append(price_line(
                pizza, ingredients, item.added, item.removed, item.quantity,
                include_unavailable=include_unavailable,
            ))
        return lines

    def quote(self, item: CartLineIn) -> PricedLine:
        return self.price_items([item])[0]

    # --- CHECKOUT ---

    def submit_order(self, form: CheckoutForm, items: Iterable[CartLineIn]):
        """Public checkout: the order waits in PENDING until the payment comes back."""
        lines = self.price_items(items)
        if not lines:
            raise InvalidOrderError("Le panier est vide")

        first_name, last_name = split_full_name(form.name)
        customer = self.customer_repo.upsert_by_phone(form.phone, first_name, last_name, form.address)

        order = self.order_repo.create_order(
            snapshot={
                "customer_name": form.name,
                "customer_phone": form.phone,
                "customer_address": form.address,
                "instructions": form.instructions or "",
                "fulfillment": "delivery",
            },
            lines=lines,
            customer_id=customer.id,
        )
        logger.info(f"🍕 Order #{order.id} created for {order.customer_phone} ({order.total:.2f})")
        return order

    # --- PAYMENT ---

    def create_payment(self, order_id: int, base_url: str) -> str:
        order = self._get(order_id)
        if order.status != OrderStatus.PENDING:
            raise InvalidTransitionError(f"La commande #{order_id} n'attend plus de paiement")

        base_url = base_url.rstrip("/")
        webhook_url = None if urlparse(base_url).hostname in LOCAL_HOSTS else f"{base_url}/api/webhooks/mollie"

        payment = self.payment_gateway.create_payment(
            amount=order.total,
            description=f"Commande #{order.id}",
            redirect_url=f"{base_url}/order/{order.id}/status",
            webhook_url=webhook_url,
            metadata={"order_id": str(order.id)},
        )
        # Kept so the status page can validate the payment on return.
        self.order_repo.set_payment_id(order.id, payment.id)
        return payment.checkout_url

    def validate_payment(self, order_id: int) -> tuple:
        """
        Asks the provider about the order's payment.
        Returns (validated, status). Orders already past PENDING are never reverted.
        """
        order = self._get(order_id)
        if not order.payment_id:
            return False, order.status
        if is_advanced(order.status):
            return True, order.status

        payment = self.payment_gateway.get_payment(order.payment_id)
        order = self._apply_payment(order, payment)
        return True, order.status

    def handle_payment_webhook(self, payment_id: str):
        payment = self.payment_gateway.get_payment(payment_id)
        order_id = payment.order_id
        if order_id is None:
            logger.warning(f"⚠️ Payment {payment_id} carries no order id, ignoring.")
            return None

        order = self.order_repo.get_order(order_id)
        if order is None:
            logger.warning(f"⚠️ Payment {payment_id} points to unknown order #{order_id}, ignoring.")
            return None
        if order.payment_id != payment.id:
            # A retried checkout replaced this payment; only the latest one may move the order.
            logger.warning(f"⚠️ Payment {payment.id} is not the current payment of order #{order.id}, ignoring.")
            return order
        return self._apply_payment(order, payment)

    def _apply_payment(self, order, payment: PaymentSession):
        if is_advanced(order.status):
            return order

        provider_status = (payment.status or "").lower()
        if provider_status == "paid":
            target = OrderStatus.CONFIRMED
        elif provider_status in PAYMENT_FAILED_STATUSES:
            target = OrderStatus.CANCELLED
        else:
            return order

        # Webhook, status page and sync job may race; only the caller that moves the row notifies.
        moved = self.order_repo.transition_status(order.id, OrderStatus.PENDING, target)
        order = self._get(order.id)
        if not moved:
            return order

        if target == OrderStatus.CONFIRMED:
            logger.info(f"✅ Order #{order.id} paid ({payment.id})")
            self.notifier.send_order_confirmation(order)
            self.notifier.notify_admin_new_order(order)
        else:
            logger.info(f"🚫 Order #{order.id} cancelled, payment {payment.id} is {provider_status}")
        return order

    # --- TRACKING ---

    def get_tracking(self, order_id: int) -> OrderTracking:
        order = self._get(order_id)
        if order.status == OrderStatus.PENDING and order.payment_id:
            try:
                self.validate_payment(order_id)
                order = self._get(order_id)
            except PaymentProviderError:
                # The customer still gets the last known status; the sync job retries.
                logger.warning(f"⚠️ Could not validate payment for order #{order_id}")

        return OrderTracking(
            id=order.id,
            status=order.status,
            stage=tracking_stage(order.status),
            customer_name=order.customer_name,
            customer_address=order.customer_address,
            total=order.total,
            created_at=order.created_at,
            updated_at=order.updated_at,
            driver_lat=order.driver_lat,
            driver_lng=order.driver_lng,
            items=[OrderItemOut.model_validate(item) for item in order.items],
        )

    # --- ADMIN ---

    def update_status(self, order_id: int, raw_status: str, force: bool = False):
        target = normalize_status(raw_status)
        order = self._get(order_id)
        if order.status == target:
            return order

        if force:
            logger.warning(f"⚠️ Forced status change on order #{order_id}: {order.status} -> {target}")
        else:
            ensure_transition(order.status, target)
        return self.order_repo.set_status(order_id, target)

    def board(self) -> dict:
        """Active orders grouped into kanban columns, oldest first."""
        orders = self.order_repo.list_by_status(BOARD_STATUSES)
        return {
            column: [order for order in orders if order.status in statuses]
            for column, statuses in BOARD_COLUMNS.items()
        }

    def create_manual_order(self, request: ManualOrderRequest):
        snapshot, lines, customer_id = self._prepare_manual(request)
        order = self.order_repo.create_order(snapshot, lines, customer_id)
        logger.info(f"📝 Manual order #{order.id} created ({request.type})")
        return order

    def update_manual_order(self, order_id: int, request: ManualOrderRequest):
        order = self._get(order_id)
        if order.status in TERMINAL_STATUSES:
            raise InvalidTransitionError(f"La commande #{order_id} est clôturée")

        snapshot, lines, customer_id = self._prepare_manual(request)
        return self.order_repo.replace_order(order_id, snapshot, lines, customer_id)

    def _prepare_manual(self, request: ManualOrderRequest):
        # Address is mandatory even for takeaway: it keeps the customer file complete.
        address = (request.address or "").strip()
        if not address:
            raise InvalidOrderError("L'adresse est requise (même pour à emporter) pour le fichier client.")

        lines = self.price_items(
            [CartLineIn(pizza_id=i.pizza_id, added=i.added, removed=i.removed, quantity=i.quantity)
             for i in request.items],
            skip_unknown=True,
            include_unavailable=True,
        )
        if not lines:
            raise InvalidOrderError("Aucune pizza valide")

        phone = normalize_phone(request.phone)
        customer = self.customer_repo.upsert_by_phone(
            phone, request.first_name.strip(), request.last_name.strip(), address
        )
        snapshot = {
            "customer_name": request.customer_name,
            "customer_phone": phone,
            "customer_address": address,
            "instructions": "",
            "fulfillment": request.type,
        }
        return snapshot, lines, customer.id

    def _get(self, order_id: int):
        order = self.order_repo.get_order(order_id)
        if order is None:
            raise NotFoundError("Commande introuvable")
        return order
