"""Tests for admin anti-forgery tokens."""

from commerce_control.config.constants import NONCE_TICK_SECONDS
from commerce_control.core.nonce import create_nonce, verify_nonce

SECRET = "secret"
NOW = 1_700_000_000.0


def test_valid_token():
    token = create_nonce(SECRET, "save", now=NOW)
    assert verify_nonce(SECRET, "save", token, now=NOW)


def test_token_is_bound_to_action():
    token = create_nonce(SECRET, "save", now=NOW)
    assert not verify_nonce(SECRET, "delete", token, now=NOW)


def test_token_is_bound_to_secret():
    token = create_nonce(SECRET, "save", now=NOW)
    assert not verify_nonce("other", "save", token, now=NOW)


def test_token_survives_one_tick():
    token = create_nonce(SECRET, "save", now=NOW)
    assert verify_nonce(SECRET, "save", token, now=NOW + NONCE_TICK_SECONDS)


def test_token_expires_after_two_ticks():
    token = create_nonce(SECRET, "save", now=NOW)
    assert not verify_nonce(SECRET, "save", token, now=NOW + 2 * NONCE_TICK_SECONDS)


def test_missing_token():
    assert not verify_nonce(SECRET, "save", None, now=NOW)
    assert not verify_nonce(SECRET, "save", "", now=NOW)
