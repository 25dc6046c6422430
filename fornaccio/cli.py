import argparse
import logging
import sys
import time

import requests

from fornaccio.core.logging_config import configure_logging
from fornaccio.domain.catalog import DEFAULT_INGREDIENTS, DEFAULT_PIZZAS
from fornaccio.domain.models import Ingredient, Pizza
from fornaccio.domain.status import OrderStatus
from fornaccio.infrastructure.database import init_db
from fornaccio.infrastructure.repositories.catalog_repository import SqlCatalogRepository
from fornaccio.infrastructure.repositories.order_repository import SqlOrderRepository

logger = logging.getLogger("fornaccio.cli")

# Grand-Place to the Cathedral, Brussels.
DRIVER_PATH = [
    (50.8467, 4.3524),
    (50.8470, 4.3540),
    (50.8472, 4.3560),
    (50.8474, 4.3580),
    (50.847556, 4.360098),
]


def cmd_init_db(args) -> int:
    return 0 if init_db() else 1


def cmd_seed(args) -> int:
    if not init_db():
        return 1
    repo = SqlCatalogRepository()
    for ingredient in DEFAULT_INGREDIENTS:
        fields = {k: v for k, v in ingredient.items() if k != "id"}
        repo.upsert(Ingredient, ingredient["id"], is_available=True, **fields)
    for pizza in DEFAULT_PIZZAS:
        fields = {k: v for k, v in pizza.items() if k != "id"}
        repo.upsert(Pizza, pizza["id"], slug=pizza["id"], is_available=True, **fields)
    logger.info(f"🌱 Seeded {len(DEFAULT_INGREDIENTS)} ingredients and {len(DEFAULT_PIZZAS)} pizzas")
    return 0


def cmd_force_delivery(args) -> int:
    repo = SqlOrderRepository()
    order = repo.latest_order()
    if order is None:
        logger.info("No orders found.")
        return 0
    logger.info(f"Found order #{order.id} - Current Status: {order.status.value}")
    updated = repo.set_status(order.id, OrderStatus.DELIVERING)
    logger.info(f"🛵 Updated order #{updated.id} to {updated.status.value}")
    return 0


def cmd_simulate_driver(args) -> int:
    url = f"{args.base_url.rstrip('/')}/api/tracking/traccar"
    logger.info(f"Starting driver simulation for Device ID: {args.device_id}")
    for index, (lat, lon) in enumerate(DRIVER_PATH, start=1):
        params = {"id": args.device_id, "lat": lat, "lon": lon, "timestamp": int(time.time() * 1000)}
        logger.info(f"[{index}/{len(DRIVER_PATH)}] Sending update: {lat}, {lon}")
        try:
            response = requests.get(url, params=params, timeout=10)
            if response.ok:
                logger.info(f" -> Success: {response.text}")
            else:
                logger.error(f" -> Failed: {response.status_code} {response.text}")
        except requests.RequestException as e:
            logger.error(f" -> Error: {e}")
        if index < len(DRIVER_PATH):
            time.sleep(args.delay)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fornaccio-cli", description="Il Fornaccio operator tools")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create database tables").set_defaults(func=cmd_init_db)
    sub.add_parser("seed", help="upsert the default ingredients and pizzas").set_defaults(func=cmd_seed)
    sub.add_parser("force-delivery", help="move the latest order to DELIVERING").set_defaults(
        func=cmd_force_delivery
    )

    simulate = sub.add_parser("simulate-driver", help="replay a GPS path against the Traccar endpoint")
    simulate.add_argument("--base-url", default="http://localhost:8000")
    simulate.add_argument("--device-id", default="123456")
    simulate.add_argument("--delay", type=float, default=2.0, help="seconds between beacons")
    simulate.set_defaults(func=cmd_simulate_driver)
    return parser


def main(argv=None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
