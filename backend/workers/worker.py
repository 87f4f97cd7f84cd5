import logging

from rq import Worker

from database import Base, engine
from workers.queue import get_connection, get_queue

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    queue = get_queue()
    logger.info("Listening for key sheet exports on queue %r", queue.name)
    worker = Worker([queue], connection=get_connection())
    worker.work(with_scheduler=True)
