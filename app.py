import click
from cachelib import SimpleCache
from flask import Flask, current_app, request
from werkzeug.exceptions import HTTPException

from auth import auth_bp
from categories import categories_bp
from config import Config
from errors import ApiError
from identity import login_manager, session_store
from logging_utils import get_logger, setup_logging
from models import db
from options import options_bp
from responses import json_error, json_ok
from tasks import tasks_bp

logger = get_logger("app")

CORS_ALLOW_HEADERS = "Content-Type, Authorization, X-Requested-With, X-CSRF-Token"
CORS_ALLOW_METHODS = "GET, POST, OPTIONS"

HTTP_MESSAGES = {
    400: "Bad request",
    404: "Not found",
    405: "Method not allowed",
}


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    setup_logging(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    init_session_store(app)
    login_manager.init_app(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(options_bp)

    app.before_request(answer_preflight)
    app.after_request(apply_cors)
    register_error_handlers(app)

    @app.cli.command('init-db')
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created.")

    return app


def init_session_store(app):
    if app.config['SESSION_TYPE'] == 'sqlalchemy':
        app.config.setdefault('SESSION_SQLALCHEMY', db)
    elif app.config['SESSION_TYPE'] == 'cachelib':
        app.config.setdefault('SESSION_CACHELIB', SimpleCache())
    session_store.init_app(app)


def answer_preflight():
    # Only for routed paths; unknown paths fall through to the 404 handler
    if request.method == 'OPTIONS' and request.url_rule is not None:
        return json_ok()
    return None


def apply_cors(response):
    origin = request.headers.get('Origin', '')
    if origin and origin in current_app.config.get('CORS_ALLOWED_ORIGINS', []):
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Access-Control-Allow-Credentials'] = 'true'
        response.headers['Access-Control-Allow-Headers'] = CORS_ALLOW_HEADERS
        response.headers['Access-Control-Allow-Methods'] = CORS_ALLOW_METHODS
        response.vary.add('Origin')
    return response


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        body = error.to_dict()
        return json_error(body.get('message'), error.status_code, body.get('errors'))

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return json_error(HTTP_MESSAGES.get(error.code, error.name), error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        db.session.rollback()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if current_app.config.get('SHOW_EXCEPTION_DETAILS'):
            return json_error(str(error), 500)
        return json_error("Internal Server Error", 500)


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        db.create_all()
    app.run()
