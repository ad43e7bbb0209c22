"""
Asymmetric algorithm behaviour through the module-level API.

Keys are handed over as PEM bytes, the way callers usually load them from disk.
"""

import re
from datetime import datetime

import pytest

from service_tokens.app import api
from service_tokens.app.errors import JsonWebTokenError, MalformedTokenError, NotBeforeError, TokenExpiredError
from service_tokens.app.models import SignOptions, VerifyOptions
from service_tokens.app.signing import Signer
from service_tokens.app.verification import Verifier

ALGORITHMS = ["RS256", "ES256", "ED25519"]


@pytest.fixture(params=ALGORITHMS)
def algorithm(request):
    return request.param


@pytest.fixture
def priv(key_pairs, algorithm):
    return key_pairs[algorithm].private_pem()


@pytest.fixture
def pub(key_pairs, algorithm):
    return key_pairs[algorithm].public_pem()


@pytest.fixture
def invalid_pub(key_pairs, algorithm):
    """Valid key of the right type that is not the public half of ``priv``."""
    return key_pairs[algorithm].invalid_public_pem()


def _verify_with_callback(token, key, **options):
    results = []
    api.verify_with_callback(token, key, callback=lambda err, decoded: results.append((err, decoded)), **options)
    assert len(results) == 1
    return results[0]


class TestSigning:
    """When signing a token."""

    @pytest.fixture
    def token(self, priv, algorithm):
        return api.sign({"foo": "bar"}, priv, algorithm=algorithm)

    def test_syntactically_valid(self, token):
        assert isinstance(token, str)
        assert len(token.split(".")) == 3

    def test_validates_with_public_key(self, token, pub, algorithm):
        decoded = api.verify(token, pub, algorithms=[algorithm])
        assert decoded["foo"] == "bar"

    def test_validates_with_public_key_callback(self, token, pub, algorithm):
        err, decoded = _verify_with_callback(token, pub, algorithms=[algorithm])
        assert err is None
        assert decoded["foo"] == "bar"

    def test_invalid_public_key(self, token, invalid_pub, algorithm):
        with pytest.raises(JsonWebTokenError, match="invalid signature"):
            api.verify(token, invalid_pub, algorithms=[algorithm])

    def test_invalid_public_key_callback(self, token, invalid_pub, algorithm):
        err, decoded = _verify_with_callback(token, invalid_pub, algorithms=[algorithm])
        assert decoded is None
        assert err is not None


class TestExpiration:
    """When signing a token with expiration."""

    def test_valid_expiration(self, priv, pub, algorithm):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm, expires_in="10m")

        err, decoded = _verify_with_callback(token, pub, algorithms=[algorithm])

        assert err is None
        assert decoded is not None

    def test_expired(self, priv, pub, algorithm):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm, expires_in=-600000)

        err, decoded = _verify_with_callback(token, pub, algorithms=[algorithm])

        assert decoded is None
        assert isinstance(err, TokenExpiredError)
        assert isinstance(err.expired_at, datetime)

    def test_ignore_expiration(self, priv, pub, algorithm):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm, expires_in=-600000)

        decoded = api.verify(token, pub, algorithms=[algorithm], ignore_expiration=True)

        assert decoded["foo"] == "bar"


class TestNotBefore:
    """When signing a token with not before."""

    def test_past_not_before(self, priv, pub, algorithm):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm, not_before=-10 * 3600)

        err, decoded = _verify_with_callback(token, pub, algorithms=[algorithm])

        assert err is None
        assert decoded is not None

    def test_future_not_before(self, priv, pub, algorithm):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm, not_before="10m")

        err, decoded = _verify_with_callback(token, pub, algorithms=[algorithm])

        assert decoded is None
        assert isinstance(err, NotBeforeError)
        assert isinstance(err.date, datetime)

    def test_valid_when_dates_are_equal(self, priv, pub, algorithm):
        clock = lambda: 1451908031  # noqa: E731
        token = Signer(api.default_registry, clock).sign(
            {"foo": "bar"}, priv, SignOptions(algorithm=algorithm, not_before=0),
        )

        decoded = Verifier(api.default_registry, clock).verify(token, pub, VerifyOptions(algorithms=[algorithm]))

        assert decoded["nbf"] == 1451908031

    def test_ignore_not_before(self, priv, pub, algorithm):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm, not_before="10m")

        decoded = api.verify(token, pub, algorithms=[algorithm], ignore_not_before=True)

        assert decoded["foo"] == "bar"


AUDIENCE_CASES = [
    # (token audience, expected, valid)
    ("urn:foo", "urn:foo", True),
    ("urn:foo", re.compile(r"urn:f[o]{2}"), True),
    ("urn:foo", ["urn:foo", "urn:other"], True),
    ("urn:foo", ["urn:bar", re.compile(r"urn:f[o]{2}"), "urn:other"], True),
    ("urn:foo", "urn:wrong", False),
    ("urn:foo", re.compile(r"urn:bar"), False),
    ("urn:foo", ["urn:wrong", "urn:morewrong", re.compile(r"urn:bar")], False),
    (["urn:foo", "urn:bar"], "urn:foo", True),
    (["urn:foo", "urn:bar"], "urn:bar", True),
    (["urn:foo", "urn:bar"], re.compile(r"urn:f[o]{2}"), True),
    (["urn:foo", "urn:bar"], ["urn:foo", "urn:other"], True),
    (["urn:foo", "urn:bar"], ["urn:one", "urn:other", re.compile(r"urn:f[o]{2}")], True),
    (["urn:foo", "urn:bar"], "urn:wrong", False),
    (["urn:foo", "urn:bar"], re.compile(r"urn:wrong"), False),
    (["urn:foo", "urn:bar"], ["urn:wrong", "urn:morewrong"], False),
    (["urn:foo", "urn:bar"], ["urn:wrong", "urn:morewrong", re.compile(r"urn:alsowrong")], False),
    (None, "urn:wrong", False),
    (None, re.compile(r"urn:wrong"), False),
    (None, ["urn:wrong", "urn:morewrong", re.compile(r"urn:alsowrong")], False),
]


class TestAudience:
    """When signing a token with (or without) an audience."""

    @pytest.mark.parametrize("token_audience, expected, valid", AUDIENCE_CASES)
    def test_audience(self, priv, pub, algorithm, token_audience, expected, valid):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm, audience=token_audience)

        err, decoded = _verify_with_callback(token, pub, algorithms=[algorithm], audience=expected)

        if valid:
            assert err is None
            assert decoded is not None
        else:
            assert decoded is None
            assert type(err) is JsonWebTokenError


class TestIdentityClaims:
    """Issuer, subject and jwt id."""

    @pytest.mark.parametrize("expected, valid", [
        ("urn:foo", True),
        (["urn:foo", "urn:bar"], True),
        ("urn:wrong", False),
    ])
    def test_issuer(self, priv, pub, algorithm, expected, valid):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm, issuer="urn:foo")

        err, decoded = _verify_with_callback(token, pub, algorithms=[algorithm], issuer=expected)

        assert (err is None) is valid
        assert (decoded is not None) is valid

    @pytest.mark.parametrize("option, value", [
        ("issuer", "urn:foo"),
        ("subject", "subject"),
        ("jwt_id", "jwtid"),
    ])
    def test_missing_claim(self, priv, pub, algorithm, option, value):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm)

        err, decoded = _verify_with_callback(token, pub, algorithms=[algorithm], **{option: value})

        assert decoded is None
        assert type(err) is JsonWebTokenError

    @pytest.mark.parametrize("option, value, wrong", [
        ("subject", "subject", "wrongSubject"),
        ("jwt_id", "jwtid", "wrongJwtid"),
    ])
    def test_exact_claims(self, priv, pub, algorithm, option, value, wrong):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm, **{option: value})

        assert api.verify(token, pub, algorithms=[algorithm], **{option: value})["foo"] == "bar"

        err, decoded = _verify_with_callback(token, pub, algorithms=[algorithm], **{option: wrong})
        assert decoded is None
        assert type(err) is JsonWebTokenError


class TestMalformedAndDecode:
    """Malformed tokens and inspection-only decoding."""

    def test_malformed_token(self, pub, algorithm):
        err, decoded = _verify_with_callback("fruit.fruit.fruit", pub, algorithms=[algorithm])

        assert decoded is None
        assert isinstance(err, MalformedTokenError)
        assert isinstance(err, JsonWebTokenError)

    def test_additional_parts(self, priv, pub, algorithm):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm)

        err, decoded = _verify_with_callback(token + ".foo", pub, algorithms=[algorithm])

        assert decoded is None
        assert isinstance(err, MalformedTokenError)

    def test_decode_invalid_token(self):
        assert api.decode("whatever.token") is None

    def test_decode_valid_token(self, priv, algorithm):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm)

        assert api.decode(token)["foo"] == "bar"

    def test_decode_complete(self, priv, algorithm):
        token = api.sign({"foo": "bar"}, priv, algorithm=algorithm)

        decoded = api.decode(token, complete=True)

        assert decoded.payload["foo"] == "bar"
        assert decoded.header == {"typ": "JWT", "alg": "EdDSA" if algorithm == "ED25519" else algorithm}
        assert isinstance(decoded.signature, str)
