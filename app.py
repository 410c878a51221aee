import logging

from flask import Flask, jsonify, request
from dotenv import load_dotenv

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from errors import register_error_handlers  # noqa: E402
from extensions import db, login_manager  # noqa: E402
from utils import utcnow  # noqa: E402

logger = logging.getLogger(__name__)


def create_app(config_object=None, **overrides) -> Flask:
    """Application factory for the CESIZen API.

    ``config_object`` defaults to :class:`config.Config`; keyword
    overrides are applied on top before any extension is bound.
    """

    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.config.update(overrides)
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    logging.basicConfig(
        level=logging.DEBUG if app.debug else app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # init extensions
    db.init_app(app)
    login_manager.init_app(app)
    import permissions  # noqa: F401  registers the Flask-Login loaders

    register_error_handlers(app)

    # blueprints
    from modules.users import bp as users_bp
    from modules.roles import bp as roles_bp
    from modules.emotions import bp as emotions_bp
    from modules.articles import bp as articles_bp
    from modules.practitioners import bp as practitioners_bp

    app.register_blueprint(users_bp)
    app.register_blueprint(roles_bp)
    app.register_blueprint(emotions_bp)
    app.register_blueprint(articles_bp)
    app.register_blueprint(practitioners_bp)

    @app.get("/health")
    def health():
        return jsonify(status="OK", timestamp=utcnow().isoformat())

    @app.after_request
    def log_request(response):
        logger.info("%s %s %s", request.method, request.path, response.status_code)
        return response

    # DB
    with app.app_context():
        # models must be imported before create_all()
        from modules.users import models as users_models  # noqa: F401
        from modules.emotions import models as emotions_models  # noqa: F401
        from modules.articles import models as articles_models  # noqa: F401
        from modules.practitioners import models as practitioners_models  # noqa: F401

        db.create_all()

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=app.config.get("DEBUG", False))
