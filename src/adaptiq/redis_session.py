import redis
from .config import settings

redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)

SESSION_PREFIX = "quiz:"
TRAINING_PREFIX = "training:"
PROGRESS_PREFIX = "progress:"
TRAINING_INDEX_PREFIX = "training-index:"


def get_redis():
    return redis_client
