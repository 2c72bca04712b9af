import logging

from authlib.integrations.flask_oauth2 import ResourceProtector
from flask import Flask, jsonify

from .config import Config
from .extensions import db, cors
from .utils.validator import Auth0JWTBearerTokenValidator, SharedSecretJWTBearerTokenValidator

logger = logging.getLogger(__name__)

# Defined at module level so blueprints can import it
require_auth = ResourceProtector()


def _register_token_validator(app):
    if app.config.get("AUTH0_DOMAIN"):
        validator = Auth0JWTBearerTokenValidator(
            app.config["AUTH0_DOMAIN"],
            app.config.get("AUTH0_API_IDENTIFIER"),
        )
    elif app.config.get("JWT_SECRET"):
        validator = SharedSecretJWTBearerTokenValidator(
            app.config["JWT_SECRET"],
            issuer=app.config.get("JWT_ISSUER"),
        )
    else:
        logger.warning("Neither AUTH0_DOMAIN nor JWT_SECRET set - authenticated routes will reject every request")
        return
    require_auth.register_token_validator(validator)


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)

    cors.init_app(
        app,
        resources={
            r"/api/*": {
                "origins": app.config["CORS_ORIGINS"],
                "methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
            }},
        supports_credentials=True,
    )

    _register_token_validator(app)

    # Import models so SQLAlchemy knows them
    from . import models  # noqa: F401
    from .services.wheel import make_rng

    app.extensions["wheel_rng"] = make_rng(app.config.get("WHEEL_SEED"))

    # Register blueprints
    from .routes.restaurants import bp as restaurants_bp
    from .routes.wheel import bp as wheel_bp
    from .routes.visits import bp as visits_bp
    from .routes.statistics import bp as statistics_bp
    from .routes.admin import bp as admin_bp
    from .routes.auth import bp as auth_bp

    app.register_blueprint(restaurants_bp, url_prefix="/api/restaurants")
    app.register_blueprint(wheel_bp, url_prefix="/api/wheel")
    app.register_blueprint(visits_bp, url_prefix="/api/visits")
    app.register_blueprint(statistics_bp, url_prefix="/api/statistics")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")

    from .cli_commands import register_commands
    register_commands(app)

    @app.get("/api/health")
    def health():
        db.session.execute(db.text("SELECT 1"))
        return jsonify(status="ok", service="restaurant-wheel-api")

    with app.app_context():
        db.create_all()

    return app
