"""
Algorithm descriptors.

A descriptor binds an algorithm name to its family, its primitive
parameters and a crypto provider. Key checks are keyed by family, so a
key of the wrong shape is rejected before the provider is ever called.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

from cryptography.hazmat.primitives import hashes

from ..errors import InvalidKeyError
from ..keys import KeyKind, KeyMaterial, PrivateKey, PublicKey, SecretKey

if TYPE_CHECKING:
    from .provider import CryptoProvider

MIN_RSA_KEY_SIZE = 2048


class AlgorithmFamily(str, Enum):
    """Cryptographic primitive category."""
    HMAC = "HMAC"
    RSA = "RSA"
    ECDSA = "ECDSA"
    EDDSA = "EdDSA"
    NONE = "none"


class KeyPurpose(str, Enum):
    """What the key is about to be used for."""
    SIGN = "sign"
    VERIFY = "verify"


_ASYMMETRIC_KINDS: Dict[AlgorithmFamily, KeyKind] = {
    AlgorithmFamily.RSA: KeyKind.RSA,
    AlgorithmFamily.ECDSA: KeyKind.EC,
    AlgorithmFamily.EDDSA: KeyKind.ED25519,
}


@dataclass(frozen=True, eq=False)
class AlgorithmDescriptor:
    """Registry entry for one signing algorithm."""
    name: str
    family: AlgorithmFamily
    provider: "CryptoProvider"
    header_name: Optional[str] = None
    hash_algorithm: Optional[Callable[[], hashes.HashAlgorithm]] = None
    curve: Optional[str] = None
    padding: Optional[str] = None

    @property
    def alg(self) -> str:
        """Value written to the ``alg`` header."""
        return self.header_name or self.name

    def check_key(
        self,
        key: Optional[KeyMaterial],
        purpose: KeyPurpose,
        *,
        allow_insecure_key_sizes: bool = False,
    ) -> None:
        """Raise ``InvalidKeyError`` unless ``key`` fits this algorithm."""
        validator = _KEY_VALIDATORS[self.family]
        validator(self, key, purpose, allow_insecure_key_sizes)

    def sign(self, data: bytes, key: Optional[KeyMaterial]) -> bytes:
        return self.provider.sign(data, key, self)

    def verify(self, data: bytes, signature: bytes, key: Optional[KeyMaterial]) -> bool:
        return self.provider.verify(data, signature, key, self)

    def __repr__(self) -> str:
        return f"AlgorithmDescriptor(name={self.name!r}, family={self.family.value!r})"


def _shape_of(key) -> Optional[str]:
    return key.shape.value if key is not None else None


def _check_no_key(descriptor, key, purpose, allow_insecure_key_sizes) -> None:
    if key is not None:
        raise InvalidKeyError(
            f'key must not be provided when using "{descriptor.name}"',
            details={"algorithm": descriptor.name},
        )


def _check_secret(descriptor, key, purpose, allow_insecure_key_sizes) -> None:
    if not isinstance(key, SecretKey):
        raise InvalidKeyError(
            f"key must be a symmetric secret when using {descriptor.name}",
            details={"algorithm": descriptor.name, "shape": _shape_of(key)},
        )
    if key.looks_like_asymmetric_key():
        raise InvalidKeyError(
            f"refusing to use asymmetric key material as an {descriptor.name} secret",
            details={"algorithm": descriptor.name},
        )


def _check_asymmetric(descriptor, key, purpose, allow_insecure_key_sizes) -> None:
    expected_type = PrivateKey if purpose is KeyPurpose.SIGN else PublicKey
    if not isinstance(key, expected_type):
        raise InvalidKeyError(
            f"key must be an asymmetric {expected_type.shape.value} key when using {descriptor.name}",
            details={"algorithm": descriptor.name, "shape": _shape_of(key)},
        )

    expected_kind = _ASYMMETRIC_KINDS[descriptor.family]
    if key.kind is not expected_kind:
        raise InvalidKeyError(
            f'"{key.kind.value}" key cannot be used with {descriptor.name}',
            details={"algorithm": descriptor.name, "kind": key.kind.value},
        )

    if descriptor.curve and key.curve_name != descriptor.curve:
        raise InvalidKeyError(
            f'{descriptor.name} requires a key on curve "{descriptor.curve}"',
            details={"algorithm": descriptor.name, "curve": key.curve_name},
        )

    if (
        purpose is KeyPurpose.SIGN
        and key.kind is KeyKind.RSA
        and not allow_insecure_key_sizes
        and key.key_size < MIN_RSA_KEY_SIZE
    ):
        raise InvalidKeyError(
            f"{descriptor.name} requires a key size of {MIN_RSA_KEY_SIZE} bits or larger",
            details={"algorithm": descriptor.name, "key_size": key.key_size},
        )


_KEY_VALIDATORS = {
    AlgorithmFamily.NONE: _check_no_key,
    AlgorithmFamily.HMAC: _check_secret,
    AlgorithmFamily.RSA: _check_asymmetric,
    AlgorithmFamily.ECDSA: _check_asymmetric,
    AlgorithmFamily.EDDSA: _check_asymmetric,
}
