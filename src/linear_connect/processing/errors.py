"""Caller-visible failures, each carrying the HTTP status it maps to."""

from __future__ import annotations


class RelayError(Exception):
    """Terminal outcome with a caller-safe message (no tokens, no tracebacks)."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigMissing(RelayError):
    status_code = 404

    def __init__(self, message: str = "Integration not found") -> None:
        super().__init__(message)


class QuotaExceeded(RelayError):
    status_code = 429

    def __init__(self, message: str = "Monthly limit exceeded") -> None:
        super().__init__(message)


class UpstreamFetchError(RelayError):
    status_code = 500


class IssueCreateError(RelayError):
    status_code = 500


class InvalidTierRequest(RelayError):
    status_code = 400

    def __init__(self, message: str = "Invalid tier") -> None:
        super().__init__(message)


class InvalidTrackerToken(RelayError):
    status_code = 400

    def __init__(self, message: str = "Invalid tracker token") -> None:
        super().__init__(message)


class SetupFailed(RelayError):
    status_code = 500
