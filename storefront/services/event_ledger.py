# storefront/services/event_ledger.py
import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, WEBHOOK_EVENT_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class EventLedger:
    """
    Remembers processed webhook event ids in Redis.
    SET NX EX: the first delivery claims the id, redeliveries see it taken.
    """

    def __init__(self, url: str | None = None, ttl: int | None = None):
        self.redis = redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.ttl = ttl or WEBHOOK_EVENT_TTL_SECONDS

    @redis_retry()
    def claim(self, event_id: str) -> bool:
        key = f"webhook:event:{event_id}"
        logger.info(f"Claim {key}")
        return bool(self.redis.set(name=key, value="1", nx=True, ex=self.ttl))
