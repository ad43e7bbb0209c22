"""
Signing algorithms package.

- descriptor: per-algorithm family, parameters and key-shape checks.
- provider: primitives backed by the ``cryptography`` library.
- registry: the name -> descriptor table shared by Signer and Verifier.
"""

from .descriptor import AlgorithmDescriptor, AlgorithmFamily, KeyPurpose, MIN_RSA_KEY_SIZE
from .provider import CryptoProvider, CryptographyProvider
from .registry import AlgorithmRegistry, standard_descriptors

__all__ = [
    "AlgorithmDescriptor",
    "AlgorithmFamily",
    "AlgorithmRegistry",
    "CryptoProvider",
    "CryptographyProvider",
    "KeyPurpose",
    "MIN_RSA_KEY_SIZE",
    "standard_descriptors",
]
