import os

APP_TITLE = "Tasks API"
APP_VERSION = "1.0"

# Default to a local SQLite file; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./database/tasks.db")
SQL_ECHO = os.environ.get("SQL_ECHO", "false").lower() in ("1", "true", "yes", "on")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Listing bounds: per_page is clamped to [1, MAX_PER_PAGE]
DEFAULT_PER_PAGE = int(os.environ.get("DEFAULT_PER_PAGE", 10))
MAX_PER_PAGE = int(os.environ.get("MAX_PER_PAGE", 50))
DEFAULT_ORDER_BY = "created_at DESC"

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", 8000))

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "X-Requested-With, Content-Type, Accept, Origin, Authorization",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, PATCH, OPTIONS",
}
