from flask import Flask, send_file, current_app
from .config import config_by_name
from .extensions import db, migrate, jwt, mongo
from .api.v1 import v1_bp
from .documents.collections import ensure_indexes
from .errors import register_error_handlers
from .realtime.broadcaster import PageBroadcaster
from .utils.logging_helpers import configure_logging
from flask_swagger_ui import get_swaggerui_blueprint
import os


def create_app(config_name: str = "development", *, mongo_client=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    configure_logging(app)

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    mongo.init_app(app, client=mongo_client)
    ensure_indexes(mongo.db)

    app.extensions["broadcaster"] = PageBroadcaster()

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC)
    # -------------------------------------------------
    @app.route("/openapi/content.yaml", methods=["GET"], endpoint="openapi_content")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "content_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("content_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/content.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "IdeaHive Content API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    app.logger.info("IdeaHive content service ready (%s)", config_name)
    return app
