"""Application factory for the shiftboard API."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import click
from flask import Flask, jsonify, redirect, url_for
from flask.cli import with_appcontext
from flask.typing import ResponseReturnValue

from .adapters.config_loader import load_config
from .dao import db as db_module
from .dao.db import DatabaseError, RecordNotFoundError
from .domain.dates import InvalidInputError
from .domain.projection import EmptyTemplateError
from .services import events, reports_service
from .services.auth import AuthContext, PermissionDenied, ADMIN

CONFIG_ENV = "SHIFTBOARD_CONFIG"

DEFAULT_CONFIG: dict[str, Any] = {
    "SECRET_KEY": "dev",
    "AUTO_INIT_DB": True,
    "LOG_LEVEL": "INFO",
    "WEEK_TEMPLATE_SNAP": False,
}

BLUEPRINTS = [
    ("shiftboard.blueprints.employees.routes", "bp"),
    ("shiftboard.blueprints.shifts.routes", "bp"),
    ("shiftboard.blueprints.templates.routes", "bp"),
    ("shiftboard.blueprints.calendar.routes", "bp"),
    ("shiftboard.blueprints.reports.routes", "bp"),
    ("shiftboard.blueprints.time_tracking.routes", "bp"),
    ("shiftboard.blueprints.messages.routes", "bp"),
]


def create_app(test_config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(
        DEFAULT_CONFIG,
        DATABASE=os.path.join(app.instance_path, "shiftboard.sqlite"),
    )

    config_path = os.environ.get(CONFIG_ENV)
    if config_path:
        app.config.update(load_config(config_path))

    if test_config:
        app.config.update(test_config)

    logging.getLogger("shiftboard").setLevel(str(app.config["LOG_LEVEL"]).upper())

    Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    app.extensions[events.EXTENSION_KEY] = events.ChangeNotifier()
    db_module.init_app(app)

    for import_path, attr in BLUEPRINTS:
        module = __import__(import_path, fromlist=[attr])
        app.register_blueprint(getattr(module, attr))

    _register_error_handlers(app)
    app.cli.add_command(export_hours_command)

    @app.get("/")
    def index() -> ResponseReturnValue:
        return redirect(url_for("calendar.month_api"))

    @app.get("/healthz")
    def healthcheck() -> tuple[str, int]:
        return "OK", 200

    if app.config.get("AUTO_INIT_DB", True):
        db_module.ensure_schema(app)

    return app


def _error(message: str, status: int) -> ResponseReturnValue:
    return jsonify({"error": message}), status


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(InvalidInputError)
    def invalid_input(exc: InvalidInputError) -> ResponseReturnValue:
        return _error(str(exc), 400)

    @app.errorhandler(PermissionDenied)
    def forbidden(exc: PermissionDenied) -> ResponseReturnValue:
        return _error(str(exc), 403)

    @app.errorhandler(RecordNotFoundError)
    def not_found(exc: RecordNotFoundError) -> ResponseReturnValue:
        return _error(str(exc), 404)

    @app.errorhandler(EmptyTemplateError)
    def empty_template(exc: EmptyTemplateError) -> ResponseReturnValue:
        return _error(str(exc), 422)

    @app.errorhandler(DatabaseError)
    def database_error(exc: DatabaseError) -> ResponseReturnValue:
        app.logger.error("Database error: %s", exc)
        return _error(str(exc), 409)


@click.command("export-hours")
@click.option("--month", "month", required=True, help="Month as YYYY-MM.")
@click.option("--output", "output", required=True, type=click.Path(dir_okay=False, path_type=Path))
@with_appcontext
def export_hours_command(month: str, output: Path) -> None:
    """Write the monthly hours report to OUTPUT (.csv or .xlsx)."""
    anchor = f"{month}-01"
    auth = AuthContext(user_id="cli", role=ADMIN)
    if output.suffix.lower() == ".xlsx":
        stream, _ = reports_service.export_hours_xlsx(auth, reports_service.MONTH, anchor)
        output.write_bytes(stream.getvalue())
    else:
        buffer, _ = reports_service.export_hours_csv(auth, reports_service.MONTH, anchor)
        output.write_text(buffer.getvalue(), encoding="utf-8")
    click.echo(f"Hours for {month} written to {output}")


if __name__ == "__main__":
    create_app().run(debug=True)
