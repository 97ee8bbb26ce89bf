# init_db.py
import logging
import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy import inspect

from config import Config
from database.config import init_engine, init_db

logger = logging.getLogger("init_db")


def create_tables(database_url=None):
    """Create all database tables"""
    engine = init_engine(database_url or Config.DATABASE_URL)
    logger.info("Creating database tables...")

    # Models are imported inside init_db so every table is registered
    init_db()

    table_names = inspect(engine).get_table_names()
    logger.info("Tables in database: %s", table_names)
    return table_names


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    create_tables(sys.argv[1] if len(sys.argv) > 1 else None)
