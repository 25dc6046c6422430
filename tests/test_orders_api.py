import unittest
from unittest import mock

import requests
from support import CUSTOMER, CUSTOMER_E164, ApiTestCase

from fornaccio.application.payment_sync import PaymentSyncWorker
from fornaccio.core.config import settings
from fornaccio.infrastructure.notification_service import NotificationService
from fornaccio.domain.status import OrderStatus


class StorefrontTests(ApiTestCase):
    def test_menu_lists_available_pizzas_with_their_ingredients(self):
        response = self.client.get("/api/menu")
        self.assertEqual(response.status_code, 200)
        menu = {p["id"]: p for p in response.json()}
        self.assertEqual(set(menu), {"margherita", "parma"})
        names = [i["name"] for i in menu["margherita"]["default_ingredients"]]
        self.assertEqual(names, ["Sauce Tomate", "Mozzarella", "Basilic"])

    def test_menu_page_renders(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Margherita", response.text)
        self.assertNotIn("Calzone", response.text)

    def test_pizza_by_slug(self):
        self.assertEqual(self.client.get("/api/pizzas/parma").json()["base_price"], 14.0)
        self.assertEqual(self.client.get("/api/pizzas/calzone").status_code, 404)

    def test_ingredients_hide_unavailable_ones(self):
        ids = [i["id"] for i in self.client.get("/api/ingredients").json()]
        self.assertIn("parma-ham", ids)
        self.assertNotIn("truffle", ids)

    def test_quote(self):
        response = self.client.post("/api/quote", json={
            "pizza_id": "margherita", "added": ["parma-ham"], "removed": ["basil"], "quantity": 2,
        })
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["unit_price"], 13.0)
        self.assertEqual(body["total_price"], 26.0)

    def test_quote_rejects_adding_a_default(self):
        response = self.client.post("/api/quote", json={"pizza_id": "margherita", "added": ["mozzarella"]})
        self.assertEqual(response.status_code, 422)
        self.assertFalse(response.json()["success"])


class CheckoutTests(ApiTestCase):
    def test_order_is_priced_on_the_server(self):
        order_id = self.place_order(items=[
            {"pizza_id": "margherita", "added": ["parma-ham"], "quantity": 2},
            {"pizza_id": "parma", "removed": ["mozzarella"]},
        ])
        order = self.order_repo.get_order(order_id)
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.total, 40.0)
        self.assertEqual(order.customer_phone, CUSTOMER_E164)
        self.assertEqual(order.fulfillment, "delivery")
        self.assertEqual(order.items[0].final_price, 26.0)
        self.assertEqual(order.items[0].added_ingredients, ["parma-ham"])
        self.assertEqual(order.items[1].removed_ingredients, ["mozzarella"])

    def test_customer_is_upserted_by_phone(self):
        self.place_order()
        self.place_order(name="Jean-Pierre Dupont", phone="+32 470 12 34 56")
        details = self.customer_repo.details_by_phone(CUSTOMER_E164)
        self.assertEqual(details["total_count"], 2)
        self.assertEqual(details["customer"].first_name, "Jean-Pierre")
        self.assertEqual(details["customer"].last_name, "Dupont")

    def test_invalid_phone_is_rejected(self):
        response = self.client.post("/api/orders", json={
            "customer": {**CUSTOMER, "phone": "12"},
            "items": [{"pizza_id": "margherita"}],
        })
        self.assertEqual(response.status_code, 422)

    def test_empty_order_and_unknown_pizza_are_rejected(self):
        response = self.client.post("/api/orders", json={"customer": CUSTOMER, "items": []})
        self.assertEqual(response.status_code, 422)
        response = self.client.post("/api/orders", json={"customer": CUSTOMER, "items": [{"pizza_id": "hawaii"}]})
        self.assertEqual(response.status_code, 422)
        response = self.client.post("/api/orders", json={"customer": CUSTOMER, "items": [{"pizza_id": "calzone"}]})
        self.assertEqual(response.status_code, 422)


class CartTests(ApiTestCase):
    def test_cart_flow(self):
        response = self.client.post("/api/cart/items", json={"pizza_id": "margherita", "added": ["parma-ham"]})
        self.assertEqual(response.status_code, 201)
        cart = self.client.post("/api/cart/items", json={"pizza_id": "parma", "quantity": 2}).json()
        self.assertEqual(cart["total"], 41.0)

        cart = self.client.delete(f"/api/cart/items/{cart['items'][0]['id']}").json()
        self.assertEqual(cart["total"], 28.0)

        response = self.client.post("/api/cart/checkout", json={"customer": CUSTOMER})
        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(response.json()["total"], 28.0)
        self.assertEqual(self.client.get("/api/cart").json()["items"], [])

    def test_checkout_of_empty_cart(self):
        response = self.client.post("/api/cart/checkout", json={"customer": CUSTOMER})
        self.assertEqual(response.status_code, 422)

    def test_clear_cart(self):
        self.client.post("/api/cart/items", json={"pizza_id": "margherita"})
        self.assertEqual(self.client.delete("/api/cart").json()["total"], 0.0)
        self.assertEqual(self.client.get("/api/cart").json()["items"], [])


class PaymentTests(ApiTestCase):
    def test_create_payment(self):
        order_id = self.place_order()
        response = self.client.post("/api/create-payment", json={"order_id": order_id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["checkout_url"], "https://pay.example/tr_test1")

        created = self.gateway.created[0]
        self.assertEqual(created["amount"], 10.0)
        self.assertEqual(created["description"], f"Commande #{order_id}")
        self.assertEqual(created["metadata"], {"order_id": str(order_id)})
        self.assertEqual(created["redirect_url"], f"https://testserver/order/{order_id}/status")
        self.assertEqual(created["webhook_url"], "https://testserver/api/webhooks/mollie")
        self.assertEqual(self.order_repo.get_order(order_id).payment_id, "tr_test1")

    def test_create_payment_for_unknown_order(self):
        response = self.client.post("/api/create-payment", json={"order_id": 999})
        self.assertEqual(response.status_code, 404)

    def test_paid_order_is_confirmed_when_tracked(self):
        order_id = self.place_order()
        self.pay(order_id, "paid")

        body = self.client.get(f"/api/orders/{order_id}").json()
        self.assertEqual(body["status"], "CONFIRMED")
        self.assertEqual(body["stage"], "confirmed")
        self.assertEqual(self.notifier.confirmations, [order_id])
        self.assertEqual(self.notifier.admin_notices, [order_id])

        response = self.client.post("/api/create-payment", json={"order_id": order_id})
        self.assertEqual(response.status_code, 409)

    def test_open_payment_keeps_order_pending(self):
        order_id = self.place_order()
        self.pay(order_id, "open")
        self.assertEqual(self.client.get(f"/api/orders/{order_id}").json()["status"], "PENDING")

    def test_webhook_cancels_failed_payment(self):
        order_id = self.place_order()
        payment_id = self.pay(order_id, "canceled")

        response = self.client.post("/api/webhooks/mollie", data={"id": payment_id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"received": True})
        self.assertEqual(self.order_repo.get_order(order_id).status, OrderStatus.CANCELLED)
        self.assertEqual(self.notifier.confirmations, [])

    def test_webhook_never_reverts_an_advanced_order(self):
        order_id = self.place_order()
        payment_id = self.pay(order_id, "expired")
        self.order_repo.set_status(order_id, OrderStatus.PREPARING)

        self.client.post("/api/webhooks/mollie", data={"id": payment_id})
        self.assertEqual(self.order_repo.get_order(order_id).status, OrderStatus.PREPARING)

    def test_webhook_errors(self):
        self.assertEqual(self.client.post("/api/webhooks/mollie", data={}).status_code, 400)
        self.assertEqual(self.client.post("/api/webhooks/mollie", data={"id": "tr_unknown"}).status_code, 500)

    def test_tracking_survives_provider_outage(self):
        order_id = self.place_order()
        self.pay(order_id, "paid")
        self.gateway.unavailable = True
        response = self.client.get(f"/api/orders/{order_id}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "PENDING")

    def test_localhost_base_gets_no_webhook(self):
        order_id = self.place_order()
        response = self.client.post(
            "/api/create-payment", json={"order_id": order_id}, headers={"host": "localhost:8000"}
        )
        self.assertEqual(response.status_code, 200)
        created = self.gateway.created[0]
        self.assertIsNone(created["webhook_url"])
        self.assertEqual(created["redirect_url"], f"http://localhost:8000/order/{order_id}/status")

    def test_public_base_url_wins_over_host_header(self):
        order_id = self.place_order()
        with mock.patch.object(settings, "PUBLIC_BASE_URL", "https://fornaccio.be/"):
            self.client.post("/api/create-payment", json={"order_id": order_id}, headers={"host": "localhost:8000"})
        created = self.gateway.created[0]
        self.assertEqual(created["redirect_url"], f"https://fornaccio.be/order/{order_id}/status")
        self.assertEqual(created["webhook_url"], "https://fornaccio.be/api/webhooks/mollie")

    def test_hosts_merely_containing_localhost_keep_their_webhook(self):
        order_id = self.place_order()
        with mock.patch.object(settings, "PUBLIC_BASE_URL", "https://mylocalhost.shop"):
            self.client.post("/api/create-payment", json={"order_id": order_id})
        self.assertEqual(self.gateway.created[0]["webhook_url"], "https://mylocalhost.shop/api/webhooks/mollie")

    def test_stale_payment_cannot_cancel_a_retried_checkout(self):
        order_id = self.place_order()
        first = self.pay(order_id, "open")
        second = self.pay(order_id, "open")
        self.assertNotEqual(first, second)

        self.gateway.set_status(first, "expired")
        self.assertEqual(self.client.post("/api/webhooks/mollie", data={"id": first}).status_code, 200)
        self.assertEqual(self.order_repo.get_order(order_id).status, OrderStatus.PENDING)

        self.gateway.set_status(second, "paid")
        self.client.post("/api/webhooks/mollie", data={"id": second})
        self.assertEqual(self.order_repo.get_order(order_id).status, OrderStatus.CONFIRMED)
        self.assertEqual(self.notifier.confirmations, [order_id])

    def test_concurrent_confirmation_notifies_once(self):
        order_id = self.place_order()
        payment_id = self.pay(order_id, "paid")
        # The webhook lands while the status page is still waiting on the provider.
        self.gateway.on_fetch = lambda: self.order_service.handle_payment_webhook(payment_id)

        validated, status = self.order_service.validate_payment(order_id)
        self.assertTrue(validated)
        self.assertEqual(status, OrderStatus.CONFIRMED)
        self.assertEqual(self.notifier.confirmations, [order_id])
        self.assertEqual(self.notifier.admin_notices, [order_id])

    def test_sms_network_failure_does_not_fail_tracking(self):
        notifier = NotificationService()
        notifier.enabled = True
        notifier.client = mock.Mock()
        notifier.client.messages.create.side_effect = requests.exceptions.ConnectionError("twilio down")
        self.order_service.notifier = notifier

        order_id = self.place_order()
        self.pay(order_id, "paid")
        response = self.client.get(f"/api/orders/{order_id}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "CONFIRMED")

    def test_payment_sync_confirms_pending_payments(self):
        paid = self.place_order()
        self.pay(paid, "paid")
        still_open = self.place_order()
        self.pay(still_open, "open")
        self.place_order()  # no payment yet

        worker = PaymentSyncWorker(self.order_service, interval_seconds=60, window_minutes=120)
        self.assertEqual(worker.sync_once(), 1)
        self.assertEqual(self.order_repo.get_order(paid).status, OrderStatus.CONFIRMED)
        self.assertEqual(self.order_repo.get_order(still_open).status, OrderStatus.PENDING)


class StatusPageTests(ApiTestCase):
    def test_status_page(self):
        order_id = self.place_order()
        response = self.client.get(f"/order/{order_id}/status")
        self.assertEqual(response.status_code, 200)
        self.assertIn(f"Commande #{order_id}", response.text)
        self.assertIn("En attente du paiement", response.text)

    def test_unknown_order_page(self):
        response = self.client.get("/order/4242/status")
        self.assertEqual(response.status_code, 404)
        self.assertIn("Commande introuvable", response.text)

    def test_unknown_order_api(self):
        response = self.client.get("/api/orders/4242")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"success": False, "error": "Commande introuvable"})


if __name__ == "__main__":
    unittest.main()
