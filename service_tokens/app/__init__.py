"""
Token engine for the 254Carbon Token Service.

Issues and verifies compact signed tokens (JWT/JWS):

- app.api: Module-level sign/verify/decode over a frozen default registry,
  plus async and callback variants.
- app.signing / app.verification: The injectable Signer and Verifier cores.
- app.algorithms: Algorithm descriptors, the registry and the crypto provider.
- app.keys: Tagged key material (secret, public, private) and its loader.
- app.encoding: Base64url segment codec.
- app.main: FastAPI token service built on shared/base_service.

Design notes:
- Verification always requires an explicit algorithm allow-list; the
  token header alone never selects the algorithm.
- Package import has no IO side effects. Token contents and key material
  are never logged.
"""

from .algorithms import AlgorithmDescriptor, AlgorithmFamily, AlgorithmRegistry, CryptographyProvider
from .api import (
    decode,
    default_registry,
    sign,
    sign_async,
    sign_with_callback,
    verify,
    verify_async,
    verify_with_callback,
)
from .errors import (
    ClaimConflictError,
    InvalidAlgorithmError,
    InvalidKeyError,
    InvalidOptionsError,
    InvalidSignatureError,
    JsonWebTokenError,
    MalformedTokenError,
    NotBeforeError,
    TokenExpiredError,
    UnsupportedAlgorithmError,
)
from .keys import KeyKind, PrivateKey, PublicKey, SecretKey, load_key
from .models import DecodedToken, SignOptions, VerifyOptions
from .signing import Signer
from .verification import ClaimsValidator, Verifier

__all__ = [
    "AlgorithmDescriptor",
    "AlgorithmFamily",
    "AlgorithmRegistry",
    "ClaimConflictError",
    "ClaimsValidator",
    "CryptographyProvider",
    "DecodedToken",
    "InvalidAlgorithmError",
    "InvalidKeyError",
    "InvalidOptionsError",
    "InvalidSignatureError",
    "JsonWebTokenError",
    "KeyKind",
    "MalformedTokenError",
    "NotBeforeError",
    "PrivateKey",
    "PublicKey",
    "SecretKey",
    "SignOptions",
    "Signer",
    "TokenExpiredError",
    "UnsupportedAlgorithmError",
    "Verifier",
    "VerifyOptions",
    "decode",
    "default_registry",
    "load_key",
    "sign",
    "sign_async",
    "sign_with_callback",
    "verify",
    "verify_async",
    "verify_with_callback",
]
