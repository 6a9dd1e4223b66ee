"""Database initialization script."""
from typing import Optional
from sqlalchemy.engine import Engine

from shoplist.models import Base
from shoplist.db.session import make_engine
from shoplist.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def init_db(engine: Optional[Engine] = None) -> Engine:
    """Create the document store tables if they do not exist."""
    engine = engine or make_engine()
    Base.metadata.create_all(engine)
    logger.info("Document store tables ready", url=str(engine.url))
    return engine


if __name__ == "__main__":
    setup_logging()
    init_db()
