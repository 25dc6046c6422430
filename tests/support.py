import unittest
from types import SimpleNamespace

from fastapi.testclient import TestClient

from conftest import ADMIN_PASSWORD
from fornaccio.domain.errors import PaymentProviderError
from fornaccio.infrastructure.cart_store import CartStore
from fornaccio.infrastructure.database import Base, engine
from fornaccio.infrastructure.repositories.catalog_repository import SqlCatalogRepository
from fornaccio.interfaces.IPaymentGateway import IPaymentGateway, PaymentSession
from fornaccio.main import app

INGREDIENTS = [
    {"id": "tomato-sauce", "name": "Sauce Tomate", "price": 0.0, "category": "base"},
    {"id": "mozzarella", "name": "Mozzarella", "price": 1.5, "category": "cheese"},
    {"id": "basil", "name": "Basilic", "price": 0.5, "category": "vegetable"},
    {"id": "parma-ham", "name": "Jambon de Parme", "price": 3.0, "category": "meat"},
    {"id": "truffle", "name": "Truffe", "price": 5.0, "category": "finish", "is_available": False},
]

PIZZAS = [
    {"id": "margherita", "name": "Margherita", "base_price": 10.0,
     "ingredients": ["tomato-sauce", "mozzarella", "basil"]},
    {"id": "parma", "name": "Parma", "base_price": 14.0,
     "ingredients": ["tomato-sauce", "mozzarella", "parma-ham"]},
    {"id": "calzone", "name": "Calzone", "base_price": 12.0,
     "ingredients": ["tomato-sauce", "mozzarella"], "is_available": False},
]

CUSTOMER = {
    "name": "Jean Dupont",
    "phone": "0470 12 34 56",
    "address": "Rue Haute 12, 1000 Bruxelles",
    "instructions": "Sonner deux fois",
}
CUSTOMER_E164 = "+32470123456"


def make_pizza(**overrides):
    fields = {"id": "margherita", "name": "Margherita", "base_price": 10.0,
              "ingredients": ["tomato-sauce", "mozzarella", "basil"], "is_available": True}
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_ingredients():
    return {
        i["id"]: SimpleNamespace(is_available=i.get("is_available", True), **{k: v for k, v in i.items() if k != "is_available"})
        for i in INGREDIENTS
    }


class FakePaymentGateway(IPaymentGateway):
    """In-memory stand-in for Mollie."""

    def __init__(self):
        self.payments = {}
        self.created = []
        self.unavailable = False
        # Called once, on the next lookup, before the payment is returned.
        self.on_fetch = None

    def create_payment(self, amount, description, redirect_url, webhook_url, metadata):
        payment_id = f"tr_test{len(self.payments) + 1}"
        payment = PaymentSession(
            id=payment_id,
            status="open",
            checkout_url=f"https://pay.example/{payment_id}",
            metadata=dict(metadata),
        )
        self.payments[payment_id] = payment
        self.created.append({
            "amount": amount,
            "description": description,
            "redirect_url": redirect_url,
            "webhook_url": webhook_url,
            "metadata": dict(metadata),
        })
        return payment

    def get_payment(self, payment_id):
        if self.on_fetch is not None:
            callback, self.on_fetch = self.on_fetch, None
            callback()
        if self.unavailable or payment_id not in self.payments:
            raise PaymentProviderError(f"Paiement inconnu: {payment_id}")
        return self.payments[payment_id]

    def set_status(self, payment_id, status):
        self.payments[payment_id].status = status


class FakeNotifier:
    def __init__(self):
        self.confirmations = []
        self.admin_notices = []

    def send_order_confirmation(self, order):
        self.confirmations.append(order.id)
        return True

    def notify_admin_new_order(self, order):
        self.admin_notices.append(order.id)
        return True


class ApiTestCase(unittest.TestCase):
    """Fresh database, seeded catalog and fake providers for every test."""

    def setUp(self):
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        self.seed_catalog()

        state = app.state
        self.gateway = FakePaymentGateway()
        self.notifier = FakeNotifier()
        self._saved = (state.order_service.payment_gateway, state.order_service.notifier, state.cart_store)
        state.order_service.payment_gateway = self.gateway
        state.order_service.notifier = self.notifier
        state.cart_store = CartStore(redis_url="")

        self.order_repo = state.order_repo
        self.customer_repo = state.customer_repo
        self.order_service = state.order_service

        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def tearDown(self):
        state = app.state
        state.order_service.payment_gateway, state.order_service.notifier, state.cart_store = self._saved

    @staticmethod
    def seed_catalog():
        repo = SqlCatalogRepository()
        for ingredient in INGREDIENTS:
            repo.create_ingredient(**{"is_available": True, **ingredient})
        for pizza in PIZZAS:
            repo.create_pizza(**{
                "slug": pizza["id"], "description": "", "image": "", "is_available": True, **pizza,
            })

    # --- helpers ---

    def login(self):
        response = self.client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
        self.assertEqual(response.status_code, 200)
        return response

    def place_order(self, items=None, **customer):
        payload = {
            "customer": {**CUSTOMER, **customer},
            "items": items or [{"pizza_id": "margherita", "quantity": 1}],
        }
        response = self.client.post("/api/orders", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["order_id"]

    def pay(self, order_id, provider_status="paid"):
        """Creates the payment and moves it to `provider_status` on the provider side."""
        response = self.client.post("/api/create-payment", json={"order_id": order_id})
        self.assertEqual(response.status_code, 200, response.text)
        payment_id = self.order_repo.get_order(order_id).payment_id
        self.gateway.set_status(payment_id, provider_status)
        return payment_id
