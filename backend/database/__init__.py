# This file makes the database directory a Python package
from .config import Base, SessionLocal, init_engine, init_db, get_engine, utcnow
