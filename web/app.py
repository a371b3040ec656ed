"""
Flask application factory for the OTP service.
"""

import logging
from typing import Optional

from flask import Flask, jsonify

from web.config import Settings
from web.routes import otp_bp

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> Flask:
    """
    Create the Flask app.

    Args:
        settings: OTP settings; loaded from the environment when None.

    Raises:
        ValueError: If the settings cannot be loaded.
    """
    if settings is None:
        settings = Settings.from_env()

    app = Flask(__name__)
    app.config["OTP_SETTINGS"] = settings
    app.register_blueprint(otp_bp)

    @app.route("/", methods=["GET"])
    def index():
        return jsonify(
            {
                "service": "otp",
                "endpoints": ["GET /api/otp/generateotp", "POST /api/otp/verifyotp"],
            }
        )

    mode = "HOTP" if settings.time_step == 0 else f"TOTP/{settings.time_step}s"
    logger.info(
        "OTP service ready (%s, %d digits, %s)",
        mode,
        settings.digits,
        settings.algorithm.value,
    )
    return app
