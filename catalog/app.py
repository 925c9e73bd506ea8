import logging

from flask import Flask, jsonify

from .config import (
    PUBLIC_FOLDER,
    Config,
    DatabaseConfigError,
    resolve_database_url,
    setup_logging,
)
from .models import ProductRepository, db
from .routes import catalog_bp
from .storage import create_storage

logger = logging.getLogger(__name__)


def create_app(test_config=None):
    app = Flask(__name__, static_folder=PUBLIC_FOLDER, static_url_path="")
    app.config.from_object(Config)
    if test_config:
        app.config.from_mapping(test_config)

    setup_logging(app.config["LOG_LEVEL"])

    repository = ProductRepository(db)
    try:
        app.config["SQLALCHEMY_DATABASE_URI"] = resolve_database_url(app.config)
    except DatabaseConfigError:
        logger.exception("Error resolving the database URL")
    else:
        repository.initialize(app)

    app.extensions["catalog_repository"] = repository
    app.extensions["catalog_storage"] = create_storage(app.config)

    app.register_blueprint(catalog_bp)

    @app.route("/health")
    def health():
        if not repository.ping():
            return jsonify({"status": "unavailable"}), 503
        return jsonify({"status": "healthy"})

    return app


def main():
    app = create_app()
    logger.info("Server running at http://localhost:%s", app.config["PORT"])
    app.run(host=app.config["HOST"], port=app.config["PORT"])


if __name__ == "__main__":
    main()
