"""Realtime subscription tokens for node status channels."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from ..core.config import settings
from ..core.exceptions import InvalidTokenError
from ..engine.status import ChannelRegistry, channel_registry

ALGORITHM = "HS256"


class SubscriptionTokenService:
    """
    Issues and verifies per-channel subscription tokens.

    A token is a signed JWT naming one channel and the topics it may
    receive, so a token for `http-request-execution` cannot be replayed
    against another channel.
    """

    def __init__(
        self,
        registry: ChannelRegistry | None = None,
        secret: str | None = None,
        ttl_seconds: int | None = None,
    ) -> None:
        self._registry = registry or channel_registry
        self._secret = secret or settings.realtime_secret
        self._ttl = timedelta(seconds=ttl_seconds or settings.realtime_token_ttl)

    def get_tokens(self, user_id: str | None = None) -> dict[str, str]:
        """Mint one token per registered channel, keyed by channel key."""
        return {channel.key: self.create_token(channel.key, user_id) for channel in self._registry}

    def channel_name_map(self) -> dict[str, str]:
        return self._registry.name_map()

    def create_token(self, channel_key: str, user_id: str | None = None) -> str:
        channel = self._registry.get(channel_key)
        now = datetime.now(timezone.utc)
        claims: dict[str, Any] = {
            "channel": channel.name,
            "topics": [channel.topic],
            "iat": now,
            "exp": now + self._ttl,
        }
        if user_id:
            claims["sub"] = user_id
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str, channel_key: str) -> dict[str, Any]:
        """
        Verify a token for a channel and return its claims.

        Raises:
            InvalidTokenError: If the token is expired, tampered with,
                or issued for another channel
        """
        if not self._registry.has(channel_key):
            raise InvalidTokenError(f"Unknown channel: {channel_key}")

        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Subscription token has expired") from None
        except jwt.PyJWTError:
            raise InvalidTokenError("Invalid subscription token") from None

        if claims.get("channel") != self._registry.get(channel_key).name:
            raise InvalidTokenError("Subscription token was issued for another channel")
        return claims
