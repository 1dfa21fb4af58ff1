import os

from .config import Config, db_config

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = db_config()

APP_TIMEZONE = Config.APP_TIMEZONE
FETCH_BATCH_SIZE = Config.FETCH_BATCH_SIZE
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, the app applies database/schema.sql on startup (CREATE IF NOT EXISTS only)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
