import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = Config.db_config()

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

DEFAULTER_THRESHOLD = Config.DEFAULTER_THRESHOLD
LOG_LEVEL = Config.LOG_LEVEL
LOG_DIR = Config.LOG_DIR
