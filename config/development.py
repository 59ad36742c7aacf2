import os

from .config import Config, db_config_from_env

SECRET_KEY = Config.SECRET_KEY
JWT_SECRET_KEY = Config.JWT_SECRET_KEY or "dev-jwt-secret"
JWT_ACCESS_TOKEN_EXPIRES_DAYS = Config.JWT_ACCESS_TOKEN_EXPIRES_DAYS

DB_CONFIG = db_config_from_env()
DB_POOL_SIZE = Config.DB_POOL_SIZE

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
HOST = Config.HOST
PORT = Config.PORT

# Apply pending schema migrations on startup (idempotent).
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
