from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .children.controller import register as register_children
from .common.responses import register_error_handlers
from .container import Container, build_container
from .contracts.controller import register as register_contracts
from .daily_records.controller import register as register_daily_records
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, ensure_demo_account, list_tables
from .messaging.controller import register as register_messaging
from .settings import get_settings_module

logger = logging.getLogger(__name__)


def create_app(*, container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Passing ``container`` skips database bootstrapping; tests use this to run
    the API on in-memory repositories.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_account(
                db_config,
                email=getattr(settings, "DEMO_EMAIL"),
                password=getattr(settings, "DEMO_PASSWORD"),
            )

        container = build_container(
            db_config=db_config,
            upload_root=getattr(settings, "UPLOAD_ROOT"),
            public_base_url=getattr(settings, "PUBLIC_BASE_URL", ""),
        )

    app.extensions["childcare_container"] = container

    register_error_handlers(app)
    register_auth(app, container)
    register_children(app, container)
    register_contracts(app, container)
    register_attendance(app, container)
    register_daily_records(app, container)
    register_messaging(app, container)
    register_dashboard(app, container)

    return app


def run() -> None:
    create_app().run()


if __name__ == "__main__":
    run()
