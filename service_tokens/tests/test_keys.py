"""
Tests for key material classification.
"""

import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.x509.oid import NameOID

from service_tokens.app.errors import InvalidKeyError
from service_tokens.app.keys import KeyKind, KeyShape, PrivateKey, PublicKey, SecretKey, load_key


def _self_signed_certificate(private_key) -> bytes:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "tokens.test")])
    now = datetime.datetime.now(datetime.timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(private_key, hashes.SHA256())
    )
    return certificate.public_bytes(serialization.Encoding.PEM)


class TestSecretKeys:
    """Plain secrets become SecretKey."""

    def test_str_secret(self):
        key = load_key("shhhhh")
        assert key == SecretKey(b"shhhhh")
        assert key.shape is KeyShape.SECRET

    def test_bytes_and_bytearray_secret(self):
        assert load_key(b"\x00\x01") == SecretKey(b"\x00\x01")
        assert load_key(bytearray(b"abc")) == SecretKey(b"abc")

    def test_secret_repr_is_redacted(self):
        assert "shhhhh" not in repr(load_key("shhhhh"))

    @pytest.mark.parametrize("raw", ["", b""])
    def test_empty_secret_is_rejected(self, raw):
        with pytest.raises(InvalidKeyError):
            load_key(raw)

    @pytest.mark.parametrize("raw", [123, {"kty": "oct", "k": "c2VjcmV0"}, ["secret"], object()])
    def test_unsupported_types_are_rejected(self, raw):
        with pytest.raises(InvalidKeyError) as exc_info:
            load_key(raw)
        assert exc_info.value.details["type"] == type(raw).__name__

    def test_pem_detection(self):
        assert SecretKey(b"-----BEGIN PUBLIC KEY-----").looks_like_asymmetric_key()
        assert not SecretKey(b"secret").looks_like_asymmetric_key()

    @pytest.mark.parametrize("algorithm", ["RS256", "ES256", "ED25519"])
    def test_openssh_detection(self, key_pairs, algorithm):
        openssh = key_pairs[algorithm].public_key.public_bytes(
            encoding=serialization.Encoding.OpenSSH,
            format=serialization.PublicFormat.OpenSSH,
        )

        assert SecretKey(openssh).looks_like_asymmetric_key()
        assert SecretKey(b"  " + openssh).looks_like_asymmetric_key()
        assert not SecretKey(b"ssh-secret").looks_like_asymmetric_key()


class TestAsymmetricKeys:
    """Key objects and PEM input become PublicKey/PrivateKey."""

    @pytest.mark.parametrize("algorithm, kind", [
        ("RS256", KeyKind.RSA),
        ("ES256", KeyKind.EC),
        ("ED25519", KeyKind.ED25519),
    ])
    def test_key_objects_are_tagged(self, key_pairs, algorithm, kind):
        pair = key_pairs[algorithm]

        private = load_key(pair.private_key)
        public = load_key(pair.public_key)

        assert isinstance(private, PrivateKey) and private.kind is kind
        assert isinstance(public, PublicKey) and public.kind is kind

    @pytest.mark.parametrize("algorithm", ["RS256", "ES384", "ED25519"])
    def test_pem_input_is_parsed(self, key_pairs, algorithm):
        pair = key_pairs[algorithm]

        assert isinstance(load_key(pair.private_pem()), PrivateKey)
        assert isinstance(load_key(pair.public_pem()), PublicKey)
        assert isinstance(load_key(pair.public_pem().decode("ascii")), PublicKey)

    def test_encrypted_pem_with_passphrase(self, key_pairs):
        pem = key_pairs["ES256"].private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(b"passphrase"),
        )

        key = load_key(pem, passphrase="passphrase")

        assert isinstance(key, PrivateKey)
        assert key.curve_name == "secp256r1"

    def test_certificate_yields_public_key(self, key_pairs):
        pem = _self_signed_certificate(key_pairs["RS256"].private_key)

        key = load_key(pem)

        assert isinstance(key, PublicKey)
        assert key.kind is KeyKind.RSA
        assert key.key_size == 2048

    def test_unparseable_pem_is_rejected(self):
        with pytest.raises(InvalidKeyError) as exc_info:
            load_key(b"-----BEGIN PUBLIC KEY-----\nnot a key\n-----END PUBLIC KEY-----\n")
        assert exc_info.value.message == "unable to parse PEM key material"

    def test_tagged_keys_pass_through(self, key_pairs):
        tagged = load_key(key_pairs["ED25519"].private_key)
        assert load_key(tagged) is tagged

    def test_private_key_exposes_public_half(self, key_pairs):
        pair = key_pairs["ES256"]
        public = load_key(pair.private_key).public()

        assert isinstance(public, PublicKey)
        assert public.kind is KeyKind.EC
        assert public.key.public_numbers() == pair.public_key.public_numbers()

    def test_private_key_repr_hides_material(self, key_pairs):
        assert repr(load_key(key_pairs["RS256"].private_key)) == "PrivateKey(kind=rsa)"
