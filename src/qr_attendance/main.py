from __future__ import annotations

import importlib
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.app_logger import setup_logging
from .config import get_settings_module
from .container import Container, build_container
from .sheets.repository import RowStore
from .teachers.controller import register as register_teachers

EXTENSION_KEY = "qr_attendance"


def load_settings(settings_module: Optional[str] = None) -> ModuleType:
    return importlib.import_module(settings_module or get_settings_module())


def create_app(settings_module: Optional[str] = None, *, store: RowStore | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = load_settings(settings_module)
    logger = setup_logging(getattr(settings, "LOG_LEVEL", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    # Missing store configuration is fatal here, not on the first request
    container = build_container(settings, store=store)
    app.extensions[EXTENSION_KEY] = container

    logger.info(
        "settings=%s store=%s qr_format=%s",
        settings.__name__,
        type(container.store).__name__,
        getattr(settings, "QR_FORMAT", "pipe"),
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    register_teachers(app, container)
    register_attendance(app, container)

    return app


def get_container(app: Flask) -> Container:
    return app.extensions[EXTENSION_KEY]
