import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Primary tier. An empty host or database means "not configured".
DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_admin"),
}

# Secondary tier (directory read path only). Empty URI means "not configured".
MONGODB_URI = os.getenv("MONGODB_URI", "")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "school_admin")

# Artificial latency when falling back to seed data.
LOCAL_LATENCY_SECONDS = float(os.getenv("LOCAL_LATENCY_SECONDS", "0.8"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the demo directory on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
