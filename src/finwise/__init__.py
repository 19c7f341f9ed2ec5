"""Finwise application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "finwise.blueprints.home"
    yield "finwise.blueprints.auth"
    yield "finwise.blueprints.dashboard"
    yield "finwise.blueprints.transactions"
    yield "finwise.blueprints.analysis"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)
    config_obj = _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["FINWISE_CONFIG"] = config_obj

    from .logging_config import setup_logging

    setup_logging(config_obj)

    _register_blueprints(app)
    _register_template_helpers(app)

    # Import lazily so importing the package does not build SQLModel mappers.
    from .extensions import init_db

    init_db(app)
    _cli.init_app(app)

    app.logger.info(
        "Application created",
        extra={"config": type(config_obj).__name__, "database_url": config_obj.DATABASE_URL},
    )
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


def _register_template_helpers(app: Flask) -> None:
    from .blueprints.auth import current_user
    from .blueprints.home import current_theme
    from .constants.categories import DEFAULT_CATALOG
    from .formatting import format_currency, format_date, format_relative_day
    from .services.periods import month_name

    symbol = app.config["FINWISE_CONFIG"].CURRENCY_SYMBOL

    app.add_template_filter(lambda value: format_currency(value, symbol=symbol), "currency")
    app.add_template_filter(month_name, "month_name")
    app.add_template_filter(format_date, "date")
    app.add_template_filter(format_relative_day, "relative_day")

    @app.context_processor
    def _inject_globals() -> dict:
        return {
            "current_user": current_user(),
            "theme": current_theme(),
            "catalog": DEFAULT_CATALOG,
        }


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
