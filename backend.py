import redis
from typing import Optional
from constants import REDIS_ENABLED, REDIS_HOST, REDIS_PORT, REDIS_PASSWORD, ROOM_ANNOUNCE_TTL, INSTANCE_ID
from redis_keys import REDIS_ROOM_OWNER_KEY
from logging_config import get_logger

logger = get_logger(__name__)


class RoomAnnouncer:
    """Publishes which relay instance hosts which room code.

    Lets a sticky router send every connection for a room code to the
    instance that owns it. Without a redis client the announcer is inert.
    Redis errors are logged and never propagate into relay state.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, instance_id: str = INSTANCE_ID, ttl: int = ROOM_ANNOUNCE_TTL):
        self.redis_client = redis_client
        self.instance_id = instance_id
        self.ttl = ttl
        if redis_client is None:
            logger.info(f"Room announcements disabled for instance {instance_id}")
        else:
            logger.info(f"Room announcements enabled for instance {instance_id} (ttl={ttl}s)")

    @property
    def enabled(self) -> bool:
        return self.redis_client is not None

    def announce(self, room: str):
        """Claim (or refresh) ownership of a room code for this instance."""
        if not self.enabled:
            return
        key = REDIS_ROOM_OWNER_KEY.format(slug=room)
        try:
            self.redis_client.set(key, self.instance_id, ex=self.ttl)
            logger.debug(f"Announced room {room} on instance {self.instance_id}")
        except redis.RedisError as e:
            logger.error(f"Failed to announce room {room}: {e}", exc_info=True)

    def withdraw(self, room: str):
        """Drop the announcement, unless another instance has taken the code since."""
        if not self.enabled:
            return
        key = REDIS_ROOM_OWNER_KEY.format(slug=room)
        try:
            owner = self.redis_client.get(key)
            if owner != self.instance_id:
                logger.debug(f"Not withdrawing room {room}: owned by {owner}")
                return
            self.redis_client.delete(key)
            logger.debug(f"Withdrew room {room} from instance {self.instance_id}")
        except redis.RedisError as e:
            logger.error(f"Failed to withdraw room {room}: {e}", exc_info=True)

    def owner_of(self, room: str) -> Optional[str]:
        if not self.enabled:
            return None
        try:
            return self.redis_client.get(REDIS_ROOM_OWNER_KEY.format(slug=room))
        except redis.RedisError as e:
            logger.error(f"Failed to look up owner of room {room}: {e}", exc_info=True)
            return None


def create_announcer() -> RoomAnnouncer:
    if not REDIS_ENABLED:
        return RoomAnnouncer()
    redis_client = redis.Redis(host=REDIS_HOST, port=REDIS_PORT, password=REDIS_PASSWORD, decode_responses=True)
    try:
        redis_client.ping()
        logger.info(f"Redis client connected successfully to {REDIS_HOST}:{REDIS_PORT}")
    except redis.RedisError as e:
        logger.error(f"Failed to connect to Redis at {REDIS_HOST}:{REDIS_PORT}: {e}", exc_info=True)
        raise
    return RoomAnnouncer(redis_client)
