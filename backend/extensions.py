from datetime import timedelta

from flask import current_app, g
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from access_control.ledger import AccessLedger
from database.config import SessionLocal
from repositories.sql import SqlGrantRepository, SqlRecordRepository, SqlUserRepository
from services.record_store import RecordStore
from services.user_directory import UserDirectory

jwt = JWTManager()
cors = CORS()


def get_db():
    """One session per request, closed on app context teardown."""
    if "db" not in g:
        g.db = SessionLocal()
    return g.db


def close_db(exc=None):
    db = g.pop("db", None)
    if db is not None:
        if exc is not None:
            db.rollback()
        db.close()


def access_ledger():
    max_minutes = current_app.config["EMERGENCY_ACCESS_MAX_MINUTES"]
    return AccessLedger(
        SqlGrantRepository(get_db()),
        emergency_max_ttl=timedelta(minutes=max_minutes),
    )


def record_store():
    return RecordStore(SqlRecordRepository(get_db()), access_ledger())


def user_directory():
    return UserDirectory(SqlUserRepository(get_db()))


def content_store():
    return current_app.extensions["content_store"]


def settlement_client():
    return current_app.extensions.get("settlement")
