from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest

from .extensions import db, migrate
from .errors import SchedulingError
from . import models  # noqa: F401  registra las tablas para Flask-Migrate

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env", override=False)
load_dotenv(BASE_DIR / "instance" / ".env", override=False)


def create_app(config_class="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Inicializar extensiones
    db.init_app(app)
    migrate.init_app(app, db)

    # Registrar blueprints
    from . import horarios, matriculas
    app.register_blueprint(horarios.bp)
    app.register_blueprint(matriculas.bp, url_prefix="/matriculas")

    _register_error_handlers(app)

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(SchedulingError)
    def handle_scheduling_error(exc):
        app.logger.warning("%s: %s", type(exc).__name__, exc.message)
        return jsonify(error=type(exc).__name__, message=exc.message), exc.status_code

    @app.errorhandler(BadRequest)
    def handle_bad_request(exc):
        errors = getattr(exc, "errors", None) or {}
        return jsonify(error="BadRequest", message=exc.description, errors=errors), 400
