"""Token adapters."""

from rewards_pools.tokens.token import ShareToken, Token

__all__ = [
    "ShareToken",
    "Token",
]
