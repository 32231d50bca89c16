# app/repos/cart_repo.py
import json
from dataclasses import dataclass
from typing import Callable, List

import redis

from app.utils.retry import redis_retry
from app.utils.settings import CART_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CartLine:
    product_id: str
    quantity: int


def _decode(raw: str | None) -> List[CartLine]:
    if not raw:
        return []
    data = json.loads(raw)
    return [
        CartLine(product_id=str(item["productId"]), quantity=int(item["quantity"]))
        for item in data.get("items", [])
        if int(item.get("quantity", 0)) >= 1
    ]


def _encode(lines: List[CartLine]) -> str:
    return json.dumps(
        {"items": [{"productId": l.product_id, "quantity": l.quantity} for l in lines]}
    )


class CartRepo:
    """
    Koszyk trzymany w Redis pod kluczem cart:<session_id>:
    {"items": [{"productId": ..., "quantity": ...}]}, TTL odswiezany przy kazdej zmianie.
    """

    def __init__(self, client: redis.Redis, ttl: int = CART_TTL_SECONDS):
        self.redis = client
        self.ttl = ttl

    @staticmethod
    def key(session_id: str) -> str:
        return f"cart:{session_id}"

    @redis_retry()
    def get_lines(self, session_id: str) -> List[CartLine]:
        return _decode(self.redis.get(self.key(session_id)))

    @redis_retry()
    def update_lines(
        self,
        session_id: str,
        mutate: Callable[[List[CartLine]], List[CartLine]],
    ) -> List[CartLine]:
        """
        Read-modify-write w jednej transakcji WATCH/MULTI.
        Jesli ktos zmieni klucz pomiedzy odczytem a EXEC, redis-py powtarza cala funkcje.
        Pusta lista usuwa klucz.
        """
        key = self.key(session_id)

        def _tx(pipe) -> List[CartLine]:
            lines = mutate(_decode(pipe.get(key)))
            lines = [l for l in lines if l.quantity >= 1]
            pipe.multi()
            if lines:
                pipe.set(key, _encode(lines), ex=self.ttl)
            else:
                pipe.delete(key)
            return lines

        return self.redis.transaction(_tx, key, value_from_callable=True)

    @redis_retry()
    def delete(self, session_id: str) -> None:
        logger.info(f"Usuwanie koszyka {self.key(session_id)}")
        self.redis.delete(self.key(session_id))
