import os

from .config import db_config_from_env

SECRET_KEY = "test-secret"
JWT_SECRET_KEY = "test-jwt-secret-with-at-least-32-bytes"
JWT_ACCESS_TOKEN_EXPIRES_DAYS = 7

DB_CONFIG = db_config_from_env()
DB_POOL_SIZE = 2

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
