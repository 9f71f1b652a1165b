"""Tests for Stripe signature verification."""

import pytest

from nodeflow.core.exceptions import WebhookSignatureError
from nodeflow.services.trigger_service import compute_stripe_signature, verify_stripe_signature

SECRET = "whsec_test"
PAYLOAD = '{"type": "checkout.session.completed"}'
NOW = 1_700_000_000


def header(timestamp=NOW, payload=PAYLOAD, secret=SECRET):
    return f"t={timestamp},v1={compute_stripe_signature(payload, str(timestamp), secret)}"


def test_valid_signature():
    verify_stripe_signature(PAYLOAD, header(), SECRET, now=NOW)


def test_any_matching_v1_signature_is_accepted():
    value = f"t={NOW},v1=deadbeef,v1={compute_stripe_signature(PAYLOAD, str(NOW), SECRET)}"
    verify_stripe_signature(PAYLOAD, value, SECRET, now=NOW)


def test_missing_header():
    with pytest.raises(WebhookSignatureError, match="required"):
        verify_stripe_signature(PAYLOAD, None, SECRET, now=NOW)


def test_malformed_header():
    with pytest.raises(WebhookSignatureError, match="Malformed"):
        verify_stripe_signature(PAYLOAD, "garbage", SECRET, now=NOW)


def test_wrong_secret():
    with pytest.raises(WebhookSignatureError, match="Invalid Stripe webhook signature"):
        verify_stripe_signature(PAYLOAD, header(secret="whsec_other"), SECRET, now=NOW)


def test_tampered_payload():
    with pytest.raises(WebhookSignatureError):
        verify_stripe_signature('{"type": "refund"}', header(), SECRET, now=NOW)


def test_stale_timestamp():
    with pytest.raises(WebhookSignatureError, match="tolerance"):
        verify_stripe_signature(PAYLOAD, header(), SECRET, now=NOW + 3600)
