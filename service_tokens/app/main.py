"""
Token service for the 254Carbon Token Service.
"""

import secrets
import time
from typing import Any, Callable, Dict, Optional

from shared.base_service import BaseService
from shared.config import TokenServiceConfig
from .algorithms import AlgorithmRegistry
from .errors import JsonWebTokenError
from .keys import KeyMaterial, load_key
from .models import (
    DecodedToken,
    DecodeTokenRequest,
    DecodeTokenResponse,
    SignOptions,
    SignTokenRequest,
    SignTokenResponse,
    TokenVerificationRequest,
    TokenVerificationResponse,
    VerifyOptions,
    build_options,
)
from .signing import Signer
from .verification import Verifier, decode

BEARER_PREFIX = "Bearer "


class TokenService(BaseService):
    """Token issuing and verification service."""

    def __init__(self, config: Optional[TokenServiceConfig] = None, clock: Callable[[], float] = time.time):
        super().__init__("tokens", 8020, config)
        self.registry = AlgorithmRegistry.default()
        self.signer = Signer(self.registry, clock)
        self.verifier = Verifier(self.registry, clock)
        self.signing_key = self._load_signing_key()
        self.verify_options = VerifyOptions(
            algorithms=self.config.allowed_algorithms,
            audience=self.config.audience,
            issuer=self.config.issuer,
            clock_tolerance=self.config.clock_tolerance,
        )

        self._setup_token_routes()

    def _load_signing_key(self) -> KeyMaterial:
        if self.config.signing_secret is None:
            self.logger.warning(
                "No signing secret configured, using an ephemeral secret",
                algorithm=self.config.signing_algorithm
            )
            return load_key(secrets.token_urlsafe(32))
        return load_key(self.config.signing_secret.get_secret_value())

    def _setup_token_routes(self):
        """Set up token-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "tokens",
                "message": "254Carbon Token Service",
                "version": "1.0.0",
                "algorithms": self.registry.names()
            }

        @self.app.post("/tokens/sign", response_model=SignTokenResponse)
        async def sign_token(request: SignTokenRequest):
            """Issue a token for the given claims."""
            options = build_options(SignOptions, None, {
                "algorithm": self.config.signing_algorithm,
                "expires_in": request.expires_in if request.expires_in is not None else self.config.expires_in,
                "audience": request.audience if request.audience is not None else self.config.audience,
                "issuer": self.config.issuer,
                "subject": request.subject,
            })

            with self.metrics.time_operation("token_operation_duration_seconds", operation="sign"):
                try:
                    token = self.signer.sign(request.claims, self.signing_key, options)
                except JsonWebTokenError as e:
                    self.metrics.record_token_operation("sign", options.algorithm, e.code)
                    raise

            self.metrics.record_token_operation("sign", options.algorithm, "success")
            return SignTokenResponse(token=token)

        @self.app.post("/tokens/verify", response_model=TokenVerificationResponse)
        async def verify_token(request: TokenVerificationRequest):
            """Verify a token; failures are reported in the body."""
            token = _strip_bearer(request.token)
            algorithm = self._algorithm_label(token)

            with self.metrics.time_operation("token_operation_duration_seconds", operation="verify"):
                try:
                    claims = self.verifier.verify(token, self.signing_key, self.verify_options)
                except JsonWebTokenError as e:
                    self.logger.info("Token verification failed", code=e.code, algorithm=algorithm)
                    self.metrics.record_token_operation("verify", algorithm, e.code)
                    return TokenVerificationResponse(valid=False, error=e.message, code=e.code)

            self.metrics.record_token_operation("verify", algorithm, "success")
            return TokenVerificationResponse(valid=True, claims=claims)

        @self.app.post("/tokens/decode", response_model=DecodeTokenResponse)
        async def decode_token(request: DecodeTokenRequest):
            """Decode a token without verifying it."""
            decoded = decode(_strip_bearer(request.token), complete=request.complete)
            status = "success" if decoded is not None else "malformed"
            self.metrics.record_token_operation("decode", "n/a", status)

            if isinstance(decoded, DecodedToken):
                return DecodeTokenResponse(decoded=decoded.to_dict())
            return DecodeTokenResponse(decoded=decoded)

    def _algorithm_label(self, token: str) -> str:
        """Metric label for the token's algorithm; unknown names collapse to one value."""
        decoded = decode(token, complete=True)
        if decoded is None:
            return "unknown"
        descriptor = self.registry.find(decoded.header.get("alg"))
        return descriptor.name if descriptor is not None else "unknown"

    async def _check_dependencies(self) -> Dict[str, Any]:
        """Token signing has no external dependencies."""
        return {"signing_key": self.signing_key.shape.value}


def _strip_bearer(token: str) -> str:
    if token.startswith(BEARER_PREFIX):
        return token[len(BEARER_PREFIX):]
    return token


def create_app():
    """Create FastAPI application."""
    service = TokenService()
    return service.app


if __name__ == "__main__":
    service = TokenService()
    service.run()
