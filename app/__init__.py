import logging
import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from app.extensions import db, login_manager, cors
from app.errors import SwalletError
from config import Config


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    os.makedirs(app.instance_path, exist_ok=True)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}})

    # Bearer-token identity for Flask-Login
    from app.models import User
    from app.services.identity_service import load_user_from_header

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.request_loader
    def load_user_from_request(request):
        return load_user_from_header(request.headers.get('Authorization'))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'message': 'Unauthorized'}), 401

    register_error_handlers(app)

    # Register blueprints
    from app.routes.auth import auth_bp
    from app.routes.groups import groups_bp
    from app.routes.transactions import transactions_bp
    from app.routes.profile import profile_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(groups_bp, url_prefix='/api')
    app.register_blueprint(transactions_bp, url_prefix='/api')
    app.register_blueprint(profile_bp, url_prefix='/api')

    with app.app_context():
        db.create_all()
        app.logger.info("Database tables ready")

    return app


def register_error_handlers(app):
    """Render every error as {"message": ...} with its status code."""

    @app.errorhandler(SwalletError)
    def handle_swallet_error(e):
        if e.status_code >= 500:
            app.logger.error("Internal error: %s", e.message)
        else:
            app.logger.warning("Request rejected (%d): %s", e.status_code, e.message)
        return jsonify({'message': e.message}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'message': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        app.logger.exception("Unhandled error")
        return jsonify({'message': 'Internal Server Error'}), 500
