import redis
from app.utils.retry import redis_retry
from app.utils.settings import IDEMPOTENCY_PENDING_TTL_SECONDS, IDEMPOTENCY_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

PENDING = "pending"

#LUA porownaj i usun, atomicity
#usuwamy rezerwacje tylko jesli nadal jest "pending", gotowego order id nie ruszamy
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class IdempotencyService:
    """
    -rezerwacja klucza idempotencji checkoutu (SET NX EX), krotki TTL dla "pending"
    -zapis wyniku (order id) pod kluczem, pelny TTL
    -zwalnianie rezerwacji po bledzie, atomowo przez lua

    Klucz jest w zakresie sesji koszyka, ten sam Idempotency-Key z innej sesji
    to inny checkout.
    """

    def __init__(
        self,
        client: redis.Redis,
        ttl: int = IDEMPOTENCY_TTL_SECONDS,
        pending_ttl: int = IDEMPOTENCY_PENDING_TTL_SECONDS,
    ):
        self.redis = client
        self.ttl = ttl
        self.pending_ttl = pending_ttl

    @staticmethod
    def key(session_id: str, idempotency_key: str) -> str:
        return f"checkout:idempotency:{session_id}:{idempotency_key}"

    @redis_retry()
    def lookup(self, session_id: str, idempotency_key: str) -> str | None:
        return self.redis.get(self.key(session_id, idempotency_key))

    @redis_retry()
    def reserve(self, session_id: str, idempotency_key: str) -> bool:
        key = self.key(session_id, idempotency_key)
        logger.info(f"Rezerwacja klucza idempotencji {key}")
        #SET checkout:idempotency:<sid>:abc "pending" NX EX 60
        #proces ktory padl w trakcie checkoutu nie blokuje klucza na dluzej niz pending_ttl
        return bool(self.redis.set(name=key, value=PENDING, nx=True, ex=self.pending_ttl))

    @redis_retry()
    def complete(self, session_id: str, idempotency_key: str, order_id: str) -> None:
        key = self.key(session_id, idempotency_key)
        logger.info(f"Klucz {key} -> zamowienie {order_id}")
        self.redis.set(name=key, value=order_id, ex=self.ttl)

    @redis_retry()
    def release(self, session_id: str, idempotency_key: str) -> bool:
        key = self.key(session_id, idempotency_key)
        logger.info(f"Zwolnienie rezerwacji {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, PENDING)
        return bool(res)
