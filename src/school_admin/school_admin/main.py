from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path

import mysql.connector
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .database.bootstrap import apply_schema, ensure_seed_directory, list_tables
from .leaves.controller import register as register_leaves
from .reports.controller import register as register_reports
from .sync.controller import register as register_sync
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(*, start_sync: bool = True) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    container = build_container(
        db_config=db_config,
        mongo_uri=getattr(settings, "MONGODB_URI", ""),
        mongo_db_name=getattr(settings, "MONGODB_DB_NAME", ""),
        local_latency_seconds=getattr(settings, "LOCAL_LATENCY_SECONDS", 0.0),
    )

    if container.conn is not None:
        try:
            if bool(getattr(settings, "AUTO_INIT_DB", False)):
                schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
                apply_schema(db_config, schema_path=schema_path)
                logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
            if bool(getattr(settings, "AUTO_SEED_DB", False)):
                ensure_seed_directory(db_config)
                logger.info("demo directory ready")
        except mysql.connector.Error as exc:
            # Startup sync falls back to the next tier.
            logger.warning("primary database bootstrap failed: %s", exc)

    if start_sync:
        container.orchestrator.start()
        atexit.register(container.orchestrator.shutdown)

    app.extensions["school_admin"] = container

    register_users(app, container)
    register_leaves(app, container)
    register_reports(app, container)
    register_sync(app, container)

    return app
