import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from foodorder.domain.errors import ConcurrencyConflict, PersistenceError
from foodorder.utils.settings import REDIS_URL, CART_LOCK_TTL_SECONDS
from foodorder.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete: only the holder of the token may release the lock
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockBusy(Exception):
    pass


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(RedisError),
    )


def lock_wait_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(LockBusy),
    )


class LockService:
    """
    Per-user cart lock in Redis.
    Serializes the read-modify-write of a cart so two concurrent
    add/remove calls cannot overwrite each other.
    """

    def __init__(self, url: str | None = None, ttl: int = CART_LOCK_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(user_id: str) -> str:
        return f"cart:{user_id}:lock"

    @redis_retry()
    def acquire(self, user_id: str, token: str) -> bool:
        # SET cart:<user>:lock <token> NX EX <ttl>
        return bool(self.redis.set(name=self._key(user_id), value=token, nx=True, ex=self.ttl))

    @redis_retry()
    def release(self, user_id: str, token: str) -> bool:
        return bool(self.redis.eval(_RELEASE_LUA, 1, self._key(user_id), token))

    @contextmanager
    def cart_lock(self, user_id: str):
        token = uuid.uuid4().hex

        @lock_wait_retry()
        def _acquire():
            if not self.acquire(user_id, token):
                raise LockBusy(user_id)

        try:
            _acquire()
        except LockBusy:
            logger.warning(f"Cart of user {user_id} is locked by another request")
            raise ConcurrencyConflict("Cart is being modified by another request")
        except RedisError as e:
            logger.error(f"Redis unavailable while locking cart of user {user_id}: {e}")
            raise PersistenceError("Cart lock store unavailable") from e

        try:
            yield
        finally:
            try:
                self.release(user_id, token)
            except RedisError as e:
                # the lock expires on its own after ttl
                logger.warning(f"Failed to release cart lock for user {user_id}: {e}")
