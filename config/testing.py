import os

SECRET_KEY = "test-secret"

# Backends unconfigured by default: tests run against the local tier.
DB_CONFIG = {
    "host": os.getenv("TEST_DB_HOST", ""),
    "port": int(os.getenv("TEST_DB_PORT", "3306")),
    "user": os.getenv("TEST_DB_USER", ""),
    "password": os.getenv("TEST_DB_PASSWORD", ""),
    "database": os.getenv("TEST_DB_NAME", ""),
}

MONGODB_URI = os.getenv("TEST_MONGODB_URI", "")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "school_admin_test")

LOCAL_LATENCY_SECONDS = 0.0

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
