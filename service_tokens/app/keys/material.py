"""
Key material handles.

Caller-supplied keys are classified exactly once, by ``load_key``, into one
of three shapes. Everything downstream matches on the shape instead of
probing the object it was given.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.hazmat.primitives.serialization import (
    load_pem_private_key,
    load_pem_public_key,
)

from ..errors import InvalidKeyError

PEM_MARKER = b"-----BEGIN"
OPENSSH_PREFIXES = (b"ssh-rsa ", b"ssh-ed25519 ", b"ssh-dss ", b"ecdsa-sha2-")


class KeyShape(str, Enum):
    """Shape of the key material."""
    SECRET = "secret"
    PUBLIC = "public"
    PRIVATE = "private"


class KeyKind(str, Enum):
    """Asymmetric key type."""
    RSA = "rsa"
    EC = "ec"
    ED25519 = "ed25519"


@dataclass(frozen=True)
class SecretKey:
    """Shared secret used by HMAC algorithms."""
    material: bytes

    shape = KeyShape.SECRET

    def __repr__(self) -> str:
        return "SecretKey(<redacted>)"

    def looks_like_asymmetric_key(self) -> bool:
        """PEM blocks and OpenSSH public keys are never HMAC secrets."""
        return PEM_MARKER in self.material or self.material.lstrip().startswith(OPENSSH_PREFIXES)


@dataclass(frozen=True)
class PublicKey:
    """Asymmetric verification key."""
    key: Any
    kind: KeyKind

    shape = KeyShape.PUBLIC

    @property
    def curve_name(self) -> Optional[str]:
        return self.key.curve.name if self.kind is KeyKind.EC else None

    @property
    def key_size(self) -> Optional[int]:
        return self.key.key_size if self.kind is KeyKind.RSA else None


@dataclass(frozen=True)
class PrivateKey:
    """Asymmetric signing key."""
    key: Any
    kind: KeyKind

    shape = KeyShape.PRIVATE

    def __repr__(self) -> str:
        return f"PrivateKey(kind={self.kind.value})"

    @property
    def curve_name(self) -> Optional[str]:
        return self.key.curve.name if self.kind is KeyKind.EC else None

    @property
    def key_size(self) -> Optional[int]:
        return self.key.key_size if self.kind is KeyKind.RSA else None

    def public(self) -> PublicKey:
        """Return the matching public key."""
        return PublicKey(self.key.public_key(), self.kind)


KeyMaterial = Union[SecretKey, PublicKey, PrivateKey]


def _classify_public(key: Any) -> Optional[PublicKey]:
    if isinstance(key, rsa.RSAPublicKey):
        return PublicKey(key, KeyKind.RSA)
    if isinstance(key, ec.EllipticCurvePublicKey):
        return PublicKey(key, KeyKind.EC)
    if isinstance(key, ed25519.Ed25519PublicKey):
        return PublicKey(key, KeyKind.ED25519)
    return None


def _classify_private(key: Any) -> Optional[PrivateKey]:
    if isinstance(key, rsa.RSAPrivateKey):
        return PrivateKey(key, KeyKind.RSA)
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return PrivateKey(key, KeyKind.EC)
    if isinstance(key, ed25519.Ed25519PrivateKey):
        return PrivateKey(key, KeyKind.ED25519)
    return None


def _load_pem(data: bytes, passphrase: Optional[bytes]) -> KeyMaterial:
    loaders = (
        lambda: load_pem_private_key(data, password=passphrase),
        lambda: load_pem_public_key(data),
        lambda: x509.load_pem_x509_certificate(data).public_key(),
    )
    for loader in loaders:
        try:
            loaded = loader()
        except (ValueError, TypeError, UnsupportedAlgorithm):
            continue
        tagged = _classify_private(loaded) or _classify_public(loaded)
        if tagged is None:
            raise InvalidKeyError("unsupported asymmetric key type")
        return tagged
    raise InvalidKeyError("unable to parse PEM key material")


def load_key(raw: Any, passphrase: Optional[Union[str, bytes]] = None) -> KeyMaterial:
    """Classify caller-supplied key material into a tagged key handle."""
    if isinstance(raw, (SecretKey, PublicKey, PrivateKey)):
        return raw

    tagged = _classify_private(raw) or _classify_public(raw)
    if tagged is not None:
        return tagged

    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    if isinstance(raw, bytearray):
        raw = bytes(raw)
    if not isinstance(raw, bytes):
        raise InvalidKeyError(
            "key must be a secret (str/bytes), a PEM-encoded key or a cryptography key object",
            details={"type": type(raw).__name__},
        )
    if not raw:
        raise InvalidKeyError("secret or key must have a value")

    if raw.lstrip().startswith(PEM_MARKER):
        if isinstance(passphrase, str):
            passphrase = passphrase.encode("utf-8")
        return _load_pem(raw.strip(), passphrase)

    return SecretKey(raw)
