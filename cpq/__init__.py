import os
import logging
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException

# Config classes read the environment at import time
load_dotenv()

from .config import DevConfig, ProdConfig, TestConfig  # noqa: E402
from .errors import ApiError  # noqa: E402

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()

CONFIGS = {
    'development': DevConfig,
    'production': ProdConfig,
    'testing': TestConfig,
}


def create_app(config_name: str | None = None, **overrides) -> Flask:
    """Application factory with environment based configuration."""
    app = Flask(__name__, instance_relative_config=True)
    os.makedirs(app.instance_path, exist_ok=True)

    # Pick configuration
    env = config_name or os.getenv('ENV') or os.getenv('FLASK_ENV') or 'production'
    app.config.from_object(CONFIGS.get(env, ProdConfig))
    app.config.update(overrides)

    # Initialise logging
    logging.basicConfig(level=logging.DEBUG if app.debug else logging.INFO)

    db.init_app(app)
    migrate.init_app(app, db)

    # Ensure models loaded so tables can be created
    from cpq import models  # noqa
    with app.app_context():
        db.create_all()

    _register_error_handlers(app)

    from cpq.health import bp as health_bp
    from cpq.customers.routes import bp as customers_bp
    from cpq.quotes.routes import bp as quotes_bp
    from cpq.cli import cpq_cli

    app.register_blueprint(health_bp)
    app.register_blueprint(customers_bp, url_prefix='/customers')
    app.register_blueprint(quotes_bp, url_prefix='/quotes')
    app.cli.add_command(cpq_cli)

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def api_error(err):
        if err.status_code >= 500:
            app.logger.error('%s: %s', type(err).__name__, err.message)
        return jsonify(ok=False, error=err.message), err.status_code

    @app.errorhandler(HTTPException)
    def http_error(err):
        return jsonify(ok=False, error=err.description), err.code

    @app.errorhandler(Exception)
    def server_error(err):
        app.logger.exception('Unhandled error')
        return jsonify(ok=False, error=str(err)), 500
