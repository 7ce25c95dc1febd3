"""Flask application factory for the ward console API."""

import logging
import os

from flask import Flask

from dashboard.routes import prescription_validation_bp

logger = logging.getLogger(__name__)


def create_app(config: dict | None = None) -> Flask:
    """Create the app with the prescription validation blueprint registered.

    Args:
        config: Optional Flask config overrides (e.g. MEDICATION_CATALOG_PATH)
    """
    app = Flask(__name__)
    app.config["MEDICATION_CATALOG_PATH"] = os.environ.get("MEDICATION_CATALOG_PATH")
    app.json.sort_keys = False
    if config:
        app.config.update(config)

    app.register_blueprint(prescription_validation_bp)
    logger.info("Registered prescription validation routes")
    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    create_app().run(
        host=os.environ.get("DASHBOARD_HOST", "127.0.0.1"),
        port=int(os.environ.get("DASHBOARD_PORT", "5000")),
    )
