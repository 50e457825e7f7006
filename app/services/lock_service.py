import uuid
from contextlib import contextmanager

import redis

from app.domain.errors import ConcurrentUpdateError
from app.utils.retry import redis_retry
from app.utils.settings import ORDER_LOCK_TTL_SECONDS, REDIS_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nie mozna wcisnac sie miedzy GET a DEL


class LockService:
    """
    -blokada zamowienia na czas zmiany stanu (jedna zmiana na raz per zamowienie)
    -zwalnianie locka tylko przez wlasciciela (lua)
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def order_key(order_id: int) -> str:
        return f"order:{order_id}:lock"

    @redis_retry()
    def acquire_order_lock(self, order_id: int, owner: str, ttl: int) -> bool:
        key = self.order_key(order_id)
        logger.info(f"Acquire lock {key} for {owner}")
        #SET order:1:lock "<owner>" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=owner,
                nx=True, #tylko jesli klucz nie istnieje
                ex=ttl, #wygasa sam, nawet jak proces padnie
            )
        )

    @redis_retry()
    def release_order_lock(self, order_id: int, owner: str) -> bool:
        key = self.order_key(order_id)
        logger.info(f"Release lock {key} for {owner}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, owner)
        return bool(res)


@contextmanager
def order_lock(lock_service, order_id: int, ttl: int = ORDER_LOCK_TTL_SECONDS):
    """
    Trzyma lock zamowienia na czas zmiany (zamowienie albo jego platnosc).
    Zajety lock -> ConcurrentUpdateError.
    """
    owner = uuid.uuid4().hex
    if not lock_service.acquire_order_lock(order_id, owner, ttl):
        raise ConcurrentUpdateError(f"Order {order_id} is being updated by another request")
    try:
        yield
    finally:
        try:
            lock_service.release_order_lock(order_id, owner)
        except redis.RedisError as e:
            # zmiana juz zapisana, lock wygasnie sam po ttl
            logger.warning(f"Release lock for order {order_id} failed: {e}")
