"""
Gateway error taxonomy.

Errors are raised where they happen and turned into HTTP responses only at
the router boundary.
"""

from __future__ import annotations


class GatewayError(RuntimeError):
    pass


# Fatal: aborts startup.
class ConfigError(GatewayError):
    pass


class StoreError(GatewayError):
    pass


class InvalidCredentials(GatewayError):
    pass


class InvalidToken(GatewayError):
    pass


# Search index or downstream lease-service failure.
class UpstreamError(GatewayError):
    pass
