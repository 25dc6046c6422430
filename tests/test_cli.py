import unittest
from unittest import mock

from support import ApiTestCase

from fornaccio import cli
from fornaccio.domain.catalog import DEFAULT_INGREDIENTS, DEFAULT_PIZZAS
from fornaccio.domain.status import OrderStatus


class CliTests(ApiTestCase):
    def test_seed_is_idempotent(self):
        self.assertEqual(cli.main(["seed"]), 0)
        self.assertEqual(cli.main(["seed"]), 0)

        catalog = self.client.app.state.catalog_repo
        self.assertEqual(len(catalog.list_pizzas()), len({p["id"] for p in DEFAULT_PIZZAS} | {"margherita", "parma", "calzone"}))
        ingredient_ids = {i.id for i in catalog.list_ingredients()}
        self.assertTrue({i["id"] for i in DEFAULT_INGREDIENTS} <= ingredient_ids)

    def test_force_delivery_moves_the_latest_order(self):
        self.place_order()
        latest = self.place_order()
        self.assertEqual(cli.main(["force-delivery"]), 0)
        self.assertEqual(self.order_repo.get_order(latest).status, OrderStatus.DELIVERING)

    def test_force_delivery_without_orders(self):
        self.assertEqual(cli.main(["force-delivery"]), 0)

    def test_simulate_driver_replays_the_path(self):
        response = mock.Mock(ok=True, text="OK", status_code=200)
        with mock.patch.object(cli.requests, "get", return_value=response) as get, \
                mock.patch.object(cli.time, "sleep"):
            self.assertEqual(cli.main(["simulate-driver", "--base-url", "http://pizza.test/", "--device-id", "42"]), 0)

        self.assertEqual(get.call_count, len(cli.DRIVER_PATH))
        url = get.call_args.args[0]
        params = get.call_args.kwargs["params"]
        self.assertEqual(url, "http://pizza.test/api/tracking/traccar")
        self.assertEqual(params["id"], "42")
        self.assertEqual((params["lat"], params["lon"]), cli.DRIVER_PATH[-1])


if __name__ == "__main__":
    unittest.main()
