"""
Registered-claim validation.

Checks run in a fixed order and stop at the first failure, so a caller
only ever learns about one problem with a token.
"""

import math
import re
from typing import Any, Dict, Iterable, List, Optional

from ..errors import JsonWebTokenError, NotBeforeError, TokenExpiredError
from ..models import VerifyOptions
from ..timespan import timespan


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    return [value]


def _describe(expected: Iterable[Any]) -> str:
    return " or ".join(item.pattern if isinstance(item, re.Pattern) else str(item) for item in expected)


class ClaimsValidator:
    """Validates temporal and identity claims against verify options."""

    def validate(self, payload: Dict[str, Any], options: VerifyOptions, now: int) -> None:
        """Raise the first claim failure, if any."""
        self._check_not_before(payload, options, now)
        self._check_expiration(payload, options, now)
        self._check_max_age(payload, options, now)
        self._check_audience(payload, options.audience)
        self._check_issuer(payload, options.issuer)
        self._check_exact(payload, "sub", options.subject, "subject")
        self._check_exact(payload, "jti", options.jwt_id, "jwtid")
        self._check_exact(payload, "nonce", options.nonce, "nonce")

    def _check_not_before(self, payload: Dict[str, Any], options: VerifyOptions, now: int) -> None:
        if "nbf" not in payload or options.ignore_not_before:
            return
        nbf = payload["nbf"]
        if not _is_number(nbf):
            raise JsonWebTokenError("invalid nbf value")
        if now + options.clock_tolerance < nbf:
            raise NotBeforeError("jwt not active", nbf)

    def _check_expiration(self, payload: Dict[str, Any], options: VerifyOptions, now: int) -> None:
        if "exp" not in payload or options.ignore_expiration:
            return
        exp = payload["exp"]
        if not _is_number(exp):
            raise JsonWebTokenError("invalid exp value")
        if now - options.clock_tolerance >= exp:
            raise TokenExpiredError("jwt expired", exp)

    def _check_max_age(self, payload: Dict[str, Any], options: VerifyOptions, now: int) -> None:
        # Independent of ignore_expiration.
        if options.max_age is None:
            return
        iat = payload.get("iat")
        if isinstance(iat, float) and not math.isfinite(iat):
            raise JsonWebTokenError("invalid iat value")
        if not _is_number(iat):
            raise JsonWebTokenError("iat required when maxAge is specified")
        deadline = timespan(options.max_age, int(iat))
        if now - options.clock_tolerance >= deadline:
            raise TokenExpiredError("maxAge exceeded", deadline)

    def _check_audience(self, payload: Dict[str, Any], expected: Optional[tuple]) -> None:
        if expected is None:
            return
        targets = [value for value in _as_list(payload.get("aud")) if isinstance(value, str)]
        matched = any(
            candidate.search(target) if isinstance(candidate, re.Pattern) else candidate == target
            for target in targets
            for candidate in expected
        )
        if not matched:
            raise JsonWebTokenError(f"jwt audience invalid. expected: {_describe(expected)}")

    def _check_issuer(self, payload: Dict[str, Any], expected: Optional[tuple]) -> None:
        if expected is None:
            return
        if payload.get("iss") not in expected:
            raise JsonWebTokenError(f"jwt issuer invalid. expected: {_describe(expected)}")

    def _check_exact(self, payload: Dict[str, Any], claim: str, expected: Optional[str], label: str) -> None:
        if expected is None:
            return
        if payload.get(claim) != expected:
            raise JsonWebTokenError(f"jwt {label} invalid. expected: {expected}")
