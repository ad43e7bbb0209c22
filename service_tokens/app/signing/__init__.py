"""
Token signing.
"""

from .signer import CLAIM_OPTIONS, TOKEN_TYPE, Signer, validate_registered_claims

__all__ = [
    "CLAIM_OPTIONS",
    "Signer",
    "TOKEN_TYPE",
    "validate_registered_claims",
]
