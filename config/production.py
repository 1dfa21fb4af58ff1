import os

from .config import Config, db_config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = db_config()

APP_TIMEZONE = Config.APP_TIMEZONE
FETCH_BATCH_SIZE = Config.FETCH_BATCH_SIZE
LOG_LEVEL = Config.LOG_LEVEL

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
