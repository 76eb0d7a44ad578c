import logging
import sys

from flask import Flask

from soshi.cli import register_commands
from soshi.config import Config
from soshi.db import db
from soshi.errors import register_error_handlers
from soshi.extensions.extensions import cors, ma
from soshi.logging_consts import (
    LOGGING_DATETIME_FORMAT_STRING,
    LOGGING_DEFAULT_LOG_LEVEL,
    LOGGING_LOG_FORMAT_STRING,
)
from soshi.middleware.gatekeeper import register_gatekeeper
from soshi import models  # noqa: F401
from soshi.routes.activity_routes import activity_bp
from soshi.routes.auth_routes import auth_bp
from soshi.routes.comment_routes import comment_bp
from soshi.routes.follow_routes import follow_bp
from soshi.routes.group_routes import group_bp
from soshi.routes.main_routes import main_bp
from soshi.routes.notification_routes import notification_bp
from soshi.routes.post_routes import post_bp
from soshi.routes.profile_routes import profile_bp
from soshi.routes.reaction_routes import reaction_bp
from soshi.routes.upload_routes import upload_bp


def _configure_logging(level_name):
    logger = logging.getLogger(__name__)
    level = logging.getLevelName(level_name)
    logger.setLevel(level if isinstance(level, int) else LOGGING_DEFAULT_LOG_LEVEL)

    if not any(getattr(h, "_soshi_console", False) for h in logger.handlers):
        console_stream = logging.StreamHandler(sys.stdout)
        console_stream.setFormatter(
            logging.Formatter(LOGGING_LOG_FORMAT_STRING, LOGGING_DATETIME_FORMAT_STRING)
        )
        console_stream._soshi_console = True
        logger.addHandler(console_stream)
    return logger


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logger = _configure_logging(app.config["LOG_LEVEL"])

    db.init_app(app)
    ma.init_app(app)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ALLOWED_ORIGINS"]}},
        supports_credentials=True,
    )

    register_error_handlers(app)
    register_gatekeeper(app)
    register_commands(app)

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    for blueprint in (
        post_bp,
        comment_bp,
        reaction_bp,
        follow_bp,
        profile_bp,
        group_bp,
        notification_bp,
        activity_bp,
        upload_bp,
    ):
        app.register_blueprint(blueprint, url_prefix="/api")

    with app.app_context():
        db.create_all()

    logger.info("Soshi started with database %s", app.config["SQLALCHEMY_DATABASE_URI"])
    return app
