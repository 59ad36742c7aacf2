import os

from .config import Config, db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
# No fallback: the app refuses to start without a signing secret.
JWT_SECRET_KEY = Config.JWT_SECRET_KEY
JWT_ACCESS_TOKEN_EXPIRES_DAYS = Config.JWT_ACCESS_TOKEN_EXPIRES_DAYS

DB_CONFIG = db_config_from_env()
DB_POOL_SIZE = Config.DB_POOL_SIZE

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL
HOST = os.getenv("HOST", "0.0.0.0")
PORT = Config.PORT

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
