import redis
from rq import Queue

from config import settings

KEY_SHEET_QUEUE = "key_sheets"


def get_connection() -> redis.Redis:
    return redis.from_url(settings.redis_url)


def get_queue() -> Queue:
    return Queue(KEY_SHEET_QUEUE, connection=get_connection())
