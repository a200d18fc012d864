"""Flask web app for the PC shop catalog.

Serves the product catalog API: unified product listings with search,
category tag filters and sorting, product details, and configurator checks.
"""

import base64
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, Response, jsonify, request

# Load environment variables from .env file (explicitly specify path)
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from catalog import __version__  # noqa: E402
from catalog.db import init_db  # noqa: E402
from catalog.seed import seed_catalog  # noqa: E402

from .api import api  # noqa: E402
from .config import (  # noqa: E402
    CATALOG_DB_PATH,
    FLASK_DEBUG,
    FLASK_HOST,
    FLASK_PORT,
    RESET_VIEWS_API_KEY,
    SEED_DEMO_DATA,
)

__all__ = ["create_app"]

logger = logging.getLogger(__name__)


# ---------- BASIC AUTH ----------


def _basic_auth_creds() -> tuple[Optional[str], Optional[str]]:
    """Get demo credentials from environment."""
    return os.getenv("DEMO_USER"), os.getenv("DEMO_PASS")


def _unauthorized() -> Response:
    return Response(
        "Authentication required",
        401,
        {"WWW-Authenticate": 'Basic realm="Login Required"'},
    )


def require_basic_auth() -> Optional[Response]:
    """
    Enforce HTTP Basic Auth for all routes except the health check.
    Skips enforcement if credentials are not configured (DEMO_USER/DEMO_PASS unset).
    """
    if request.path == "/api/health":
        return None

    user, password = _basic_auth_creds()
    if not user or not password:
        return None  # auth disabled

    header = request.headers.get("Authorization", "")
    if not header.startswith("Basic "):
        return _unauthorized()

    try:
        decoded = base64.b64decode(header.split(" ", 1)[1]).decode("utf-8")
        username, passwd = decoded.split(":", 1)
    except (ValueError, UnicodeDecodeError):
        return _unauthorized()

    if username == user and passwd == password:
        return None
    return _unauthorized()


# ---------- APP FACTORY ----------


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """Create the Flask app.

    Args:
        config: Overrides for app.config (e.g. CATALOG_DB_PATH in tests).
    """
    flask_app = Flask(__name__)
    flask_app.config["CATALOG_DB_PATH"] = CATALOG_DB_PATH
    flask_app.config["RESET_VIEWS_API_KEY"] = RESET_VIEWS_API_KEY
    flask_app.config["SEED_DEMO_DATA"] = SEED_DEMO_DATA
    if config:
        flask_app.config.update(config)

    db_path = flask_app.config["CATALOG_DB_PATH"]
    init_db(db_path)
    if flask_app.config["SEED_DEMO_DATA"]:
        seed_catalog(db_path)

    flask_app.before_request(require_basic_auth)
    flask_app.register_blueprint(api)

    @flask_app.route("/", methods=["GET"])
    def index() -> Response:
        """Describe the API."""
        return jsonify({
            "name": "PC shop catalog",
            "version": __version__,
            "endpoints": sorted(
                str(rule) for rule in flask_app.url_map.iter_rules() if str(rule).startswith("/api")
            ),
        })

    logger.info("Catalog app ready (db: %s)", db_path)
    return flask_app


if __name__ == "__main__":
    app = create_app()
    # For local demo use debug=True if you like
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=FLASK_DEBUG)
