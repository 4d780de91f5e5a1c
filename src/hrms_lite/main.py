from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from . import __version__
from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import API_NAME
from .employees.controller import register as register_employees

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["APP_VERSION"] = getattr(settings, "APP_VERSION", __version__)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("Starting %s with settings=%s", API_NAME, settings_module)

    if container is None:
        container = build_container(
            backend=getattr(settings, "STORE_BACKEND", "mysql"),
            db_config=getattr(settings, "DB_CONFIG", None),
            auto_init_db=bool(getattr(settings, "AUTO_INIT_DB", False)),
        )
    app.extensions["hrms_container"] = container

    register_error_handlers(app)
    register_employees(app, container)
    register_attendance(app, container)

    @app.route("/", methods=["GET"], endpoint="root")
    def root():
        return {"success": True, "message": API_NAME, "version": app.config["APP_VERSION"]}

    return app
