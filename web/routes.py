"""
OTP API routes.

- GET  /api/otp/generateotp  → current code as a JSON string
- POST /api/otp/verifyotp    → {"OtpCode": "123456"} → JSON status string

Each request gets its own engine built from the configured secret, so no
state is shared between requests.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from core.errors import OTPError
from web.config import Settings

logger = logging.getLogger(__name__)

VALID_MESSAGE = "The code you supplied is valid"
INVALID_MESSAGE = "The code you supplied is invalid"

otp_bp = Blueprint("otp", __name__, url_prefix="/api/otp")


def _settings() -> Settings:
    return current_app.config["OTP_SETTINGS"]


@otp_bp.route("/generateotp", methods=["GET"])
def generate_otp():
    otp = _settings().build_engine()
    return jsonify(otp.generate_code())


@otp_bp.route("/verifyotp", methods=["POST"])
def verify_otp():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or data.get("OtpCode") is None:
        return jsonify({"error": "OtpCode is required"}), 400

    code = data["OtpCode"]
    if not isinstance(code, (str, int)) or isinstance(code, bool):
        return jsonify({"error": "OtpCode must be a string or an integer"}), 400

    otp = _settings().build_engine()
    try:
        is_valid = otp.is_code_valid(code)
    except OTPError as exc:
        logger.info("Rejected malformed OTP submission: %s", exc)
        return jsonify({"error": str(exc)}), 400

    return jsonify(VALID_MESSAGE if is_valid else INVALID_MESSAGE)
