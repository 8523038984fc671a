import os

from .config import Config

SECRET_KEY = Config.SECRET_KEY

DB_CONFIG = Config.db_config()

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create demo admin/teacher/student accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

DEFAULTER_THRESHOLD = Config.DEFAULTER_THRESHOLD
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_DIR = Config.LOG_DIR
