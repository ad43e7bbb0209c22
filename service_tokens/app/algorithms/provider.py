"""
Crypto provider backed by the ``cryptography`` library.

The provider is the narrow seam between the engine and the primitives:
``sign(data, key, descriptor) -> bytes`` and
``verify(data, signature, key, descriptor) -> bool``. Keys arrive already
validated against the descriptor's family.
"""

from typing import Protocol

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import constant_time, hmac
from cryptography.hazmat.primitives.asymmetric import ec, padding
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from ..keys import KeyMaterial
from .descriptor import AlgorithmDescriptor, AlgorithmFamily


class CryptoProvider(Protocol):
    """Interface consumed by algorithm descriptors."""

    def sign(self, data: bytes, key: KeyMaterial, descriptor: AlgorithmDescriptor) -> bytes:
        ...

    def verify(self, data: bytes, signature: bytes, key: KeyMaterial, descriptor: AlgorithmDescriptor) -> bool:
        ...


class CryptographyProvider:
    """Default provider implementing HMAC, RSA, RSA-PSS, ECDSA and EdDSA."""

    def sign(self, data: bytes, key: KeyMaterial, descriptor: AlgorithmDescriptor) -> bytes:
        family = descriptor.family
        if family is AlgorithmFamily.HMAC:
            return self._hmac(data, key.material, descriptor)
        if family is AlgorithmFamily.RSA:
            return key.key.sign(data, self._rsa_padding(descriptor), descriptor.hash_algorithm())
        if family is AlgorithmFamily.ECDSA:
            der = key.key.sign(data, ec.ECDSA(descriptor.hash_algorithm()))
            r, s = decode_dss_signature(der)
            size = self._coordinate_size(key.key.curve)
            return r.to_bytes(size, "big") + s.to_bytes(size, "big")
        if family is AlgorithmFamily.EDDSA:
            return key.key.sign(data)
        if family is AlgorithmFamily.NONE:
            return b""
        raise ValueError(f"unknown algorithm family: {family}")

    def verify(self, data: bytes, signature: bytes, key: KeyMaterial, descriptor: AlgorithmDescriptor) -> bool:
        family = descriptor.family
        if family is AlgorithmFamily.HMAC:
            expected = self._hmac(data, key.material, descriptor)
            return constant_time.bytes_eq(expected, signature)
        if family is AlgorithmFamily.NONE:
            return signature == b""

        try:
            if family is AlgorithmFamily.RSA:
                key.key.verify(signature, data, self._rsa_padding(descriptor), descriptor.hash_algorithm())
            elif family is AlgorithmFamily.ECDSA:
                size = self._coordinate_size(key.key.curve)
                if len(signature) != 2 * size:
                    return False
                r = int.from_bytes(signature[:size], "big")
                s = int.from_bytes(signature[size:], "big")
                key.key.verify(encode_dss_signature(r, s), data, ec.ECDSA(descriptor.hash_algorithm()))
            elif family is AlgorithmFamily.EDDSA:
                key.key.verify(signature, data)
            else:
                raise ValueError(f"unknown algorithm family: {family}")
        except InvalidSignature:
            return False
        return True

    @staticmethod
    def _hmac(data: bytes, secret: bytes, descriptor: AlgorithmDescriptor) -> bytes:
        mac = hmac.HMAC(secret, descriptor.hash_algorithm())
        mac.update(data)
        return mac.finalize()

    @staticmethod
    def _rsa_padding(descriptor: AlgorithmDescriptor) -> padding.AsymmetricPadding:
        if descriptor.padding == "pss":
            return padding.PSS(
                mgf=padding.MGF1(descriptor.hash_algorithm()),
                salt_length=padding.PSS.DIGEST_LENGTH,
            )
        return padding.PKCS1v15()

    @staticmethod
    def _coordinate_size(curve: ec.EllipticCurve) -> int:
        return (curve.key_size + 7) // 8
