"""
Algorithm registry.

The registry is built once at startup and handed to the Signer and
Verifier by reference. ``AlgorithmRegistry.default()`` returns a frozen
registry with the standard JWA algorithms; tests may build their own
registry with fake descriptors.
"""

from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional

from cryptography.hazmat.primitives import hashes

from ..errors import UnsupportedAlgorithmError
from .descriptor import AlgorithmDescriptor, AlgorithmFamily
from .provider import CryptoProvider, CryptographyProvider

_HASHES = {"256": hashes.SHA256, "384": hashes.SHA384, "512": hashes.SHA512}
_CURVES = {"256": "secp256r1", "384": "secp384r1", "512": "secp521r1"}


class AlgorithmRegistry:
    """Name -> descriptor table, read-only once frozen."""

    def __init__(self, descriptors: Iterable[AlgorithmDescriptor] = ()):
        self._descriptors: Dict[str, AlgorithmDescriptor] = {}
        self._aliases: Dict[str, AlgorithmDescriptor] = {}
        self._frozen = False
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: AlgorithmDescriptor) -> None:
        """Add a descriptor; its header name becomes a lookup alias."""
        if self._frozen:
            raise RuntimeError("algorithm registry is frozen")
        for name in {descriptor.name, descriptor.alg}:
            if name in self._descriptors or name in self._aliases:
                raise ValueError(f"algorithm already registered: {name}")

        self._descriptors[descriptor.name] = descriptor
        if descriptor.alg != descriptor.name:
            self._aliases[descriptor.alg] = descriptor

    def freeze(self) -> "AlgorithmRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def find(self, name: object) -> Optional[AlgorithmDescriptor]:
        """Look up by registry name or header name."""
        if not isinstance(name, str):
            return None
        return self._descriptors.get(name) or self._aliases.get(name)

    def get(self, name: object) -> AlgorithmDescriptor:
        descriptor = self.find(name)
        if descriptor is None:
            raise UnsupportedAlgorithmError(name, details={"supported": self.names()})
        return descriptor

    def resolve(self, names: Iterable[str]) -> FrozenSet[AlgorithmDescriptor]:
        """Resolve an allow-list; every entry must be registered."""
        return frozenset(self.get(name) for name in names)

    def names(self) -> List[str]:
        return list(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return self.find(name) is not None

    def __iter__(self) -> Iterator[AlgorithmDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    @classmethod
    def default(cls, provider: Optional[CryptoProvider] = None) -> "AlgorithmRegistry":
        """Build the frozen standard registry."""
        registry = cls(standard_descriptors(provider or CryptographyProvider()))
        registry.freeze()
        return registry


def standard_descriptors(provider: CryptoProvider) -> List[AlgorithmDescriptor]:
    """HS*, RS*, PS*, ES*, ED25519 and none."""
    descriptors: List[AlgorithmDescriptor] = []

    for bits, hash_algorithm in _HASHES.items():
        descriptors.append(AlgorithmDescriptor(
            name=f"HS{bits}", family=AlgorithmFamily.HMAC, provider=provider,
            hash_algorithm=hash_algorithm,
        ))
    for bits, hash_algorithm in _HASHES.items():
        descriptors.append(AlgorithmDescriptor(
            name=f"RS{bits}", family=AlgorithmFamily.RSA, provider=provider,
            hash_algorithm=hash_algorithm, padding="pkcs1v15",
        ))
    for bits, hash_algorithm in _HASHES.items():
        descriptors.append(AlgorithmDescriptor(
            name=f"PS{bits}", family=AlgorithmFamily.RSA, provider=provider,
            hash_algorithm=hash_algorithm, padding="pss",
        ))
    for bits, hash_algorithm in _HASHES.items():
        descriptors.append(AlgorithmDescriptor(
            name=f"ES{bits}", family=AlgorithmFamily.ECDSA, provider=provider,
            hash_algorithm=hash_algorithm, curve=_CURVES[bits],
        ))

    descriptors.append(AlgorithmDescriptor(
        name="ED25519", family=AlgorithmFamily.EDDSA, provider=provider, header_name="EdDSA",
    ))
    descriptors.append(AlgorithmDescriptor(
        name="none", family=AlgorithmFamily.NONE, provider=provider,
    ))
    return descriptors
