"""
OTP service – entry point.

Usage
-----
    OTP_SECRET_KEY=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ python main.py

Or, if installed as a package:
    otp-service
"""

import logging
import os
import sys

from web.app import create_app

# ── Logging setup ─────────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("otp")

# Keep secret handling quiet below WARNING
logging.getLogger("core.crypto").setLevel(logging.WARNING)
logging.getLogger("storage.secret_store").setLevel(logging.WARNING)


# ── Main ──────────────────────────────────────────────────────────────────────

def main() -> None:
    try:
        app = create_app()
    except ValueError as exc:
        logger.error("Cannot start OTP service: %s", exc)
        sys.exit(1)

    host = os.environ.get("OTP_HOST", "127.0.0.1")
    port = int(os.environ.get("OTP_PORT", "5000"))
    app.run(host=host, port=port)


if __name__ == "__main__":
    main()
