import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()


class Config:
    DATABASE_URL                = os.getenv("DATABASE_URL", "sqlite:///health_records.db")
    SQL_ECHO                    = os.getenv("SQL_ECHO", "false").lower() == "true"

    JWT_SECRET_KEY              = os.getenv("JWT_SECRET_KEY", "super-secret-key-change-in-production")
    JWT_ACCESS_TOKEN_EXPIRES    = timedelta(seconds=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES", "3600")))

    CORS_ORIGINS                = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL                   = os.getenv("LOG_LEVEL", "INFO")

    # Uploads are proxied to the content store, 10MB limit
    MAX_CONTENT_LENGTH          = int(os.getenv("MAX_CONTENT_LENGTH", str(10 * 1024 * 1024)))

    IPFS_API_URL                = os.getenv("IPFS_API_URL", "http://127.0.0.1:5001")
    IPFS_GATEWAY_URL            = os.getenv("IPFS_GATEWAY_URL", "https://ipfs.io/ipfs")
    IPFS_PROJECT_ID             = os.getenv("IPFS_PROJECT_ID")
    IPFS_PROJECT_SECRET         = os.getenv("IPFS_PROJECT_SECRET")
    IPFS_TIMEOUT_SECONDS        = float(os.getenv("IPFS_TIMEOUT_SECONDS", "10"))

    # Optional; when unset records are created without a transaction reference
    SETTLEMENT_URL              = os.getenv("SETTLEMENT_URL")
    SETTLEMENT_API_TOKEN        = os.getenv("SETTLEMENT_API_TOKEN")
    SETTLEMENT_TIMEOUT_SECONDS  = float(os.getenv("SETTLEMENT_TIMEOUT_SECONDS", "5"))

    EMERGENCY_ACCESS_MINUTES     = int(os.getenv("EMERGENCY_ACCESS_MINUTES", "60"))
    EMERGENCY_ACCESS_MAX_MINUTES = int(os.getenv("EMERGENCY_ACCESS_MAX_MINUTES", "1440"))


class TestConfig(Config):
    TESTING                     = True
    DATABASE_URL                = "sqlite://"
    JWT_SECRET_KEY              = "test-secret-key-with-enough-length-for-hs256"
    JWT_ACCESS_TOKEN_EXPIRES    = timedelta(minutes=15)
    IPFS_API_URL                = "http://ipfs.test:5001"
    SETTLEMENT_URL              = None
    LOG_LEVEL                   = "WARNING"
