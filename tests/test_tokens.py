"""Tests for realtime subscription tokens."""

import jwt
import pytest

from nodeflow.core.exceptions import InvalidTokenError
from nodeflow.engine.status import channel_registry
from nodeflow.services.realtime_service import SubscriptionTokenService

SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def tokens():
    return SubscriptionTokenService(secret=SECRET, ttl_seconds=60)


def test_one_token_per_channel(tokens):
    issued = tokens.get_tokens("user_1")
    assert set(issued) == set(channel_registry.keys())


def test_channel_name_map(tokens):
    assert tokens.channel_name_map()["httpRequest"] == "http-request-execution"


def test_token_claims(tokens):
    token = tokens.get_tokens("user_1")["openai"]
    claims = tokens.verify(token, "openai")

    assert claims["channel"] == "openai-execution"
    assert claims["topics"] == ["status"]
    assert claims["sub"] == "user_1"


def test_token_for_other_channel_rejected(tokens):
    token = tokens.create_token("openai")
    with pytest.raises(InvalidTokenError, match="another channel"):
        tokens.verify(token, "httpRequest")


def test_unknown_channel_rejected(tokens):
    with pytest.raises(InvalidTokenError, match="Unknown channel"):
        tokens.verify(tokens.create_token("openai"), "slack")


def test_expired_token_rejected():
    expired = SubscriptionTokenService(secret=SECRET, ttl_seconds=-10)
    token = expired.create_token("webhook")
    with pytest.raises(InvalidTokenError, match="expired"):
        expired.verify(token, "webhook")


def test_token_signed_with_other_secret_rejected(tokens):
    forged = jwt.encode({"channel": "webhook-execution", "topics": ["status"]}, "x" * 40, algorithm="HS256")
    with pytest.raises(InvalidTokenError, match="Invalid subscription token"):
        tokens.verify(forged, "webhook")
