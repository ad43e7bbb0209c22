"""
Token verification.

Each step is a hard gate: structure, algorithm allow-list, key shape,
signature, then claims. A failure at any step stops the remaining ones.
"""

import math
import time
from typing import Any, Callable, Dict, Optional, Union

from shared.logging import get_logger
from ..algorithms import AlgorithmDescriptor, AlgorithmFamily, AlgorithmRegistry, KeyPurpose
from ..errors import InvalidAlgorithmError, InvalidKeyError, InvalidSignatureError, JsonWebTokenError
from ..keys import KeyMaterial, PrivateKey, load_key
from ..models import DecodedToken, VerifyOptions
from .claims import ClaimsValidator
from .parser import ParsedToken, parse_token


class Verifier:
    """Verifies compact tokens against a registry and caller options."""

    def __init__(
        self,
        registry: AlgorithmRegistry,
        clock: Callable[[], float] = time.time,
        claims_validator: Optional[ClaimsValidator] = None,
    ):
        self.registry = registry
        self.clock = clock
        self.claims_validator = claims_validator or ClaimsValidator()
        self.logger = get_logger("tokens.verifier")

    def verify(
        self,
        token: Any,
        key: Any,
        options: VerifyOptions,
    ) -> Union[Dict[str, Any], DecodedToken]:
        """Return the payload (or the complete token) of a valid token."""
        try:
            parsed = parse_token(token)
            descriptor = self._select_algorithm(parsed, options)
            material = self._verification_key(descriptor, key)

            if not descriptor.verify(parsed.signing_input, parsed.signature, material):
                raise InvalidSignatureError()

            self.claims_validator.validate(parsed.payload, options, self._now(options))
        except JsonWebTokenError as e:
            self.logger.debug("Token verification failed", code=e.code)
            raise

        self.logger.debug("Token verified", algorithm=descriptor.name)
        if options.complete:
            return parsed.decoded()
        return parsed.payload

    def _select_algorithm(self, parsed: ParsedToken, options: VerifyOptions) -> AlgorithmDescriptor:
        allowed = self.registry.resolve(options.algorithms)
        descriptor = self.registry.find(parsed.algorithm)
        if descriptor is None or descriptor not in allowed:
            raise InvalidAlgorithmError(details={"allowed": sorted(d.name for d in allowed)})
        return descriptor

    def _verification_key(self, descriptor: AlgorithmDescriptor, key: Any) -> Optional[KeyMaterial]:
        if key is None and descriptor.family is not AlgorithmFamily.NONE:
            raise InvalidKeyError(
                "secret or public key must be provided",
                details={"algorithm": descriptor.name},
            )

        material = load_key(key) if key is not None else None
        if isinstance(material, PrivateKey):
            material = material.public()

        descriptor.check_key(material, KeyPurpose.VERIFY)
        return material

    def _now(self, options: VerifyOptions) -> int:
        if options.clock_timestamp is not None:
            return options.clock_timestamp
        return math.floor(self.clock())
