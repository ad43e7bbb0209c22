"""
Key material package.

``load_key`` is the only place caller input is inspected; the rest of the
engine receives ``SecretKey``, ``PublicKey`` or ``PrivateKey`` handles.
"""

from .material import (
    KeyKind,
    KeyMaterial,
    KeyShape,
    PrivateKey,
    PublicKey,
    SecretKey,
    load_key,
)

__all__ = [
    "KeyKind",
    "KeyMaterial",
    "KeyShape",
    "PrivateKey",
    "PublicKey",
    "SecretKey",
    "load_key",
]
