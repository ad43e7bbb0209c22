"""
Error taxonomy for token signing and verification.

Every failure raised by the engine derives from ``JsonWebTokenError`` so
callers can catch the whole family at once, while the subclasses keep
structural, algorithm, key, signature and claim failures apart.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from shared.errors import TokenServiceException


class JsonWebTokenError(TokenServiceException):
    """Base token error; raised directly for claim-content mismatches."""

    code = "JSON_WEB_TOKEN_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(self.code, message, details)


class MalformedTokenError(JsonWebTokenError):
    """Token is not a well-formed compact JWS."""

    code = "MALFORMED_TOKEN"

    def __init__(self, message: str = "jwt malformed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class UnsupportedAlgorithmError(JsonWebTokenError):
    """Algorithm is not present in the registry."""

    code = "UNSUPPORTED_ALGORITHM"

    def __init__(self, algorithm: Any, details: Optional[Dict[str, Any]] = None):
        self.algorithm = algorithm
        super().__init__(f'"{algorithm}" is not a supported algorithm', details)


class InvalidAlgorithmError(JsonWebTokenError):
    """Algorithm is not acceptable for this call."""

    code = "INVALID_ALGORITHM"

    def __init__(self, message: str = "invalid algorithm", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidKeyError(JsonWebTokenError):
    """Key material does not fit the algorithm family."""

    code = "INVALID_KEY"


class InvalidSignatureError(JsonWebTokenError):
    """Signature did not verify."""

    code = "INVALID_SIGNATURE"

    def __init__(self, message: str = "invalid signature", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ClaimConflictError(JsonWebTokenError):
    """A sign option and a payload claim both try to set the same field."""

    code = "CLAIM_CONFLICT"

    def __init__(self, option: str, claim: str):
        self.option = option
        self.claim = claim
        super().__init__(
            f'Bad "options.{option}" option. The payload already has an "{claim}" property.',
            details={"option": option, "claim": claim},
        )


class InvalidOptionsError(JsonWebTokenError):
    """Sign or verify options failed validation."""

    code = "INVALID_OPTIONS"


def _utc(seconds: float) -> datetime:
    """UTC instant for a claim value, clamped to the representable range."""
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        limit = datetime.max if seconds > 0 else datetime.min
        return limit.replace(tzinfo=timezone.utc)


class TokenExpiredError(JsonWebTokenError):
    """Token is past its ``exp`` (or ``iat + max_age``)."""

    code = "TOKEN_EXPIRED"

    def __init__(self, message: str, expired_at: float):
        self.expired_at = _utc(expired_at)
        super().__init__(message, details={"expired_at": self.expired_at.isoformat()})


class NotBeforeError(JsonWebTokenError):
    """Token is not valid yet."""

    code = "TOKEN_NOT_ACTIVE"

    def __init__(self, message: str, date: float):
        self.date = _utc(date)
        super().__init__(message, details={"date": self.date.isoformat()})
