import logging
import os
import sys
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Database: explicit URL wins, then the Postgres pieces, then a local SQLite file
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_HOST = os.getenv("PG_HOST")
DB_NAME = os.getenv("DB_NAME")


def build_database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    if DB_HOST and DB_NAME:
        return f"postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}/{DB_NAME}"
    return "sqlite+aiosqlite:///./smartspend.db"


DATABASE_URL = build_database_url()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]

# Sessions
SESSION_TTL_DAYS = int(os.getenv("SESSION_TTL_DAYS", "7"))

# Insights
ANALYSIS_WINDOW_MONTHS = int(os.getenv("ANALYSIS_WINDOW_MONTHS", "3"))
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₦")
PERSIST_INSIGHTS = os.getenv("PERSIST_INSIGHTS", "true").lower() in ("1", "true", "yes")


def validate_env():
    """Validate required environment variables at startup."""
    if APP_ENV != "production":
        return

    has_url = bool(os.getenv("DATABASE_URL"))
    required_vars = {
        "PG_HOST": DB_HOST,
        "DB_NAME": DB_NAME,
        "DB_USER": DB_USER,
        "DB_PASS": DB_PASS,
    }
    missing = [] if has_url else [name for name, value in required_vars.items() if not value]

    if missing:
        logger.error("[Config] Missing required environment variables for production:")
        for var in missing:
            logger.error(f"[Config]    - {var}")
        logger.error("[Config] Set DATABASE_URL or the Postgres variables in .env")
        sys.exit(1)
