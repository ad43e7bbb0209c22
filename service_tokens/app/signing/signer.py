"""
Token signing.
"""

import math
import time
from typing import Any, Callable, Dict, Mapping, Optional

from shared.logging import get_logger
from ..algorithms import AlgorithmDescriptor, AlgorithmFamily, AlgorithmRegistry, KeyPurpose
from ..encoding import encode_json_segment, encode_segment, join_segments
from ..errors import ClaimConflictError, InvalidAlgorithmError, InvalidKeyError, JsonWebTokenError
from ..keys import KeyMaterial, load_key
from ..models import SignOptions
from ..timespan import timespan

TOKEN_TYPE = "JWT"

# Sign option -> registered claim it would set.
CLAIM_OPTIONS = (
    ("expires_in", "exp"),
    ("not_before", "nbf"),
    ("audience", "aud"),
    ("issuer", "iss"),
    ("subject", "sub"),
    ("jwt_id", "jti"),
)

_NUMERIC_CLAIMS = ("iat", "exp", "nbf")
_STRING_CLAIMS = ("iss", "sub", "jti")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_registered_claims(payload: Mapping[str, Any]) -> None:
    """Reject registered claims of the wrong JSON type."""
    for claim in _NUMERIC_CLAIMS:
        if claim in payload and not _is_number(payload[claim]):
            raise JsonWebTokenError(f'"{claim}" should be a number of seconds', details={"claim": claim})

    for claim in _STRING_CLAIMS:
        if claim in payload and not isinstance(payload[claim], str):
            raise JsonWebTokenError(f'"{claim}" must be a string', details={"claim": claim})

    if "aud" in payload:
        audience = payload["aud"]
        valid = isinstance(audience, str) or (
            isinstance(audience, list) and all(isinstance(item, str) for item in audience)
        )
        if not valid:
            raise JsonWebTokenError('"aud" must be a string or a list of strings', details={"claim": "aud"})


class Signer:
    """Builds and signs compact tokens."""

    def __init__(self, registry: AlgorithmRegistry, clock: Callable[[], float] = time.time):
        self.registry = registry
        self.clock = clock
        self.logger = get_logger("tokens.signer")

    def sign(self, payload: Mapping[str, Any], key: Any, options: SignOptions) -> str:
        """Return a signed token for ``payload``."""
        if not isinstance(payload, Mapping):
            raise JsonWebTokenError(
                "payload must be a mapping",
                details={"type": type(payload).__name__},
            )

        descriptor = self.registry.get(options.algorithm)
        material = self._signing_key(descriptor, key, options)
        claims = self._build_claims(payload, options)
        header = self._build_header(descriptor, options)

        signing_input = join_segments(encode_json_segment(header), encode_json_segment(claims))
        signature = descriptor.sign(signing_input.encode("ascii"), material)

        self.logger.debug("Token signed", algorithm=descriptor.name)
        return join_segments(signing_input, encode_segment(signature))

    def _signing_key(
        self,
        descriptor: AlgorithmDescriptor,
        key: Any,
        options: SignOptions,
    ) -> Optional[KeyMaterial]:
        if descriptor.family is AlgorithmFamily.NONE:
            if not options.allow_unsigned:
                raise InvalidAlgorithmError(
                    'unsigned tokens require "allow_unsigned"',
                    details={"algorithm": descriptor.name},
                )
            descriptor.check_key(None if key is None else load_key(key), KeyPurpose.SIGN)
            return None

        if key is None:
            raise InvalidKeyError(
                "secret or private key must have a value",
                details={"algorithm": descriptor.name},
            )
        material = load_key(key)
        descriptor.check_key(
            material,
            KeyPurpose.SIGN,
            allow_insecure_key_sizes=options.allow_insecure_key_sizes,
        )
        return material

    def _build_claims(self, payload: Mapping[str, Any], options: SignOptions) -> Dict[str, Any]:
        claims = dict(payload)
        validate_registered_claims(claims)

        for option, claim in CLAIM_OPTIONS:
            if getattr(options, option) is not None and claim in claims:
                raise ClaimConflictError(option, claim)

        timestamp = claims.get("iat", math.floor(self.clock()))
        if options.no_timestamp:
            claims.pop("iat", None)
        else:
            claims["iat"] = timestamp

        if options.not_before is not None:
            claims["nbf"] = timespan(options.not_before, timestamp)
        if options.expires_in is not None:
            claims["exp"] = timespan(options.expires_in, timestamp)
        if options.audience is not None:
            claims["aud"] = options.audience
        if options.issuer is not None:
            claims["iss"] = options.issuer
        if options.subject is not None:
            claims["sub"] = options.subject
        if options.jwt_id is not None:
            claims["jti"] = options.jwt_id

        return claims

    def _build_header(self, descriptor: AlgorithmDescriptor, options: SignOptions) -> Dict[str, Any]:
        header: Dict[str, Any] = {"typ": TOKEN_TYPE, "alg": descriptor.alg}
        header.update(options.header)
        if options.key_id is not None:
            header["kid"] = options.key_id
        return header
