import json
import logging
import uuid
from typing import List

import redis
from redis.exceptions import RedisError

from fornaccio.core.config import settings
from fornaccio.domain.pricing import PricedLine
from fornaccio.domain.schemas import CartLine, CartOut

logger = logging.getLogger(__name__)

CART_COOKIE = "fornaccio_cart"


class CartStore:
    """
    Shopping carts keyed by the cart cookie.
    Redis when reachable, process memory otherwise.
    """

    def __init__(self, redis_url: str | None = None, ttl: int | None = None):
        self.ttl = ttl or settings.CART_TTL_SECONDS
        self.redis = None
        self.redis_available = False

        # 1. Primary Memory (Redis)
        url = redis_url if redis_url is not None else settings.REDIS_URL
        if url:
            try:
                self.redis = redis.from_url(
                    url,
                    decode_responses=True,
                    socket_connect_timeout=1  # Fail fast if Redis is down
                )
                self.redis.ping()
                self.redis_available = True
                logger.info("✅ CartStore: Connected to Redis.")
            except RedisError as e:
                logger.warning(f"⚠️ CartStore: Redis unreachable ({e}). Using RAM fallback.")
        else:
            logger.info("CartStore: REDIS_URL not set, carts kept in memory.")

        # 2. Fallback Memory (RAM)
        self._memory_store: dict = {}

    @staticmethod
    def new_cart_id() -> str:
        return uuid.uuid4().hex

    def get_cart(self, cart_id: str) -> CartOut:
        lines = self._load(cart_id)
        return CartOut(items=lines, total=self.total(lines))

    def add_line(self, cart_id: str, priced: PricedLine) -> CartOut:
        lines = self._load(cart_id)
        lines.append(CartLine(
            id=str(uuid.uuid4()),
            pizza_id=priced.pizza_id,
            name=priced.pizza_name,
            base_price=priced.base_price,
            added=priced.added,
            removed=priced.removed,
            quantity=priced.quantity,
            total_price=priced.line_total,
        ))
        self._save(cart_id, lines)
        return CartOut(items=lines, total=self.total(lines))

    def remove_line(self, cart_id: str, line_id: str) -> CartOut:
        lines = [line for line in self._load(cart_id) if line.id != line_id]
        self._save(cart_id, lines)
        return CartOut(items=lines, total=self.total(lines))

    def clear(self, cart_id: str) -> None:
        key = self._key(cart_id)
        if self.redis_available:
            try:
                self.redis.delete(key)
            except RedisError as e:
                self._handle_redis_error(e)
        self._memory_store.pop(key, None)

    @staticmethod
    def total(lines: List[CartLine]) -> float:
        return round(sum(line.total_price for line in lines), 2)

    # --- Storage ---

    @staticmethod
    def _key(cart_id: str) -> str:
        return f"cart:{cart_id}"

    def _load(self, cart_id: str) -> List[CartLine]:
        key = self._key(cart_id)
        data = None

        if self.redis_available:
            try:
                data = self.redis.get(key)
            except RedisError as e:
                self._handle_redis_error(e)

        if data is None:
            data = self._memory_store.get(key)
        if not data:
            return []
        return [CartLine(**line) for line in json.loads(data)]

    def _save(self, cart_id: str, lines: List[CartLine]) -> None:
        key = self._key(cart_id)
        json_data = json.dumps([line.model_dump() for line in lines])

        if self.redis_available:
            try:
                self.redis.setex(key, self.ttl, json_data)
            except RedisError as e:
                self._handle_redis_error(e)

        # Always write to RAM so a Redis outage does not empty the cart.
        self._memory_store[key] = json_data

    def _handle_redis_error(self, e):
        """Log error and switch flag to False to stop trying Redis."""
        logger.error(f"❌ Redis Error: {e}. Switching to RAM mode.")
        self.redis_available = False
