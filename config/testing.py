from .config import Config, db_config

SECRET_KEY = "test-secret"
DB_CONFIG = db_config()

APP_TIMEZONE = "America/Sao_Paulo"
FETCH_BATCH_SIZE = Config.FETCH_BATCH_SIZE
LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
