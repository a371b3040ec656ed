"""Tests for the web package (settings and OTP routes)."""

import pytest

from core.totp import Algorithm
from web.app import create_app
from web.config import Settings
from web.routes import INVALID_MESSAGE, VALID_MESSAGE

RFC_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture()
def hotp_client():
    """Client for a service in HOTP mode; every request starts at counter 0."""
    app = create_app(Settings(secret_key=RFC_SECRET_B32, time_step=0))
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture()
def totp_client():
    app = create_app(Settings(secret_key=RFC_SECRET_B32))
    app.config["TESTING"] = True
    return app.test_client()


# ── Settings ──────────────────────────────────────────────────────────────────

def test_settings_from_env_defaults() -> None:
    settings = Settings.from_env({"OTP_SECRET_KEY": RFC_SECRET_B32})
    assert settings.digits == 6
    assert settings.time_step == 30
    assert settings.algorithm is Algorithm.SHA1


def test_settings_from_env_overrides() -> None:
    settings = Settings.from_env(
        {
            "OTP_SECRET_KEY": RFC_SECRET_B32,
            "OTP_DIGITS": "8",
            "OTP_TIME_STEP": "0",
            "OTP_ALGORITHM": "sha256",
        }
    )
    assert settings.digits == 8
    assert settings.time_step == 0
    assert settings.algorithm is Algorithm.SHA256


def test_settings_missing_secret() -> None:
    with pytest.raises(ValueError):
        Settings.from_env({})


@pytest.mark.parametrize(
    "overrides",
    [
        {"OTP_DIGITS": "ten"},
        {"OTP_DIGITS": "3"},
        {"OTP_TIME_STEP": "10"},
        {"OTP_ALGORITHM": "MD5"},
        {"OTP_SECRET_KEY": "not base32!"},
    ],
)
def test_settings_invalid_values(overrides: dict) -> None:
    environ = {"OTP_SECRET_KEY": RFC_SECRET_B32, **overrides}
    with pytest.raises(ValueError):
        Settings.from_env(environ)


def test_build_engine_applies_settings() -> None:
    otp = Settings(secret_key=RFC_SECRET_B32, digits=8, time_step=0).build_engine()
    assert otp.digits == 8
    assert otp.time_step == 0
    assert otp.generate_code() == "84755224"


# ── Routes ────────────────────────────────────────────────────────────────────

def test_index(hotp_client) -> None:
    resp = hotp_client.get("/")
    assert resp.status_code == 200
    assert "POST /api/otp/verifyotp" in resp.get_json()["endpoints"]


def test_generate_hotp_is_stateless(hotp_client) -> None:
    first = hotp_client.get("/api/otp/generateotp")
    second = hotp_client.get("/api/otp/generateotp")
    assert first.status_code == 200
    assert first.get_json() == "755224"
    assert second.get_json() == "755224"


def test_verify_valid_code(hotp_client) -> None:
    resp = hotp_client.post("/api/otp/verifyotp", json={"OtpCode": "755 224"})
    assert resp.status_code == 200
    assert resp.get_json() == VALID_MESSAGE


def test_verify_integer_code(hotp_client) -> None:
    resp = hotp_client.post("/api/otp/verifyotp", json={"OtpCode": 755224})
    assert resp.get_json() == VALID_MESSAGE


def test_verify_invalid_code(hotp_client) -> None:
    resp = hotp_client.post("/api/otp/verifyotp", json={"OtpCode": "000000"})
    assert resp.status_code == 200
    assert resp.get_json() == INVALID_MESSAGE


def test_verify_overlong_code_is_invalid(hotp_client) -> None:
    resp = hotp_client.post("/api/otp/verifyotp", json={"OtpCode": "12345678901"})
    assert resp.status_code == 200
    assert resp.get_json() == INVALID_MESSAGE


def test_verify_malformed_code(hotp_client) -> None:
    resp = hotp_client.post("/api/otp/verifyotp", json={"OtpCode": "12ab56"})
    assert resp.status_code == 400
    assert "error" in resp.get_json()


@pytest.mark.parametrize("body", [None, {}, {"OtpCode": None}, {"OtpCode": [1, 2]}, {"OtpCode": True}])
def test_verify_bad_body(hotp_client, body) -> None:
    if body is None:
        resp = hotp_client.post("/api/otp/verifyotp", data="not json")
    else:
        resp = hotp_client.post("/api/otp/verifyotp", json=body)
    assert resp.status_code == 400


def test_totp_generate_then_verify(totp_client) -> None:
    code = totp_client.get("/api/otp/generateotp").get_json()
    assert len(code) == 6 and code.isdigit()
    resp = totp_client.post("/api/otp/verifyotp", json={"OtpCode": code})
    assert resp.get_json() == VALID_MESSAGE
