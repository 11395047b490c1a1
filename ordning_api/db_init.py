"""
Create the schema directly from the models, without alembic.
Handy for a fresh SQLite file or a throwaway database:

    python -m ordning_api.db_init
"""
import logging

from .db import engine
from .models import Base

logger = logging.getLogger(__name__)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Schema created on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
