"""
Shared fixtures for token engine tests.
"""

import pytest

from shared.test_helpers import TestKeyFactory
from service_tokens.app.algorithms import AlgorithmRegistry
from service_tokens.app.signing import Signer
from service_tokens.app.verification import Verifier

FIXED_NOW = 1_700_000_000
SECRET = "shhhhh-this-is-a-test-secret-0123456789"

ASYMMETRIC_ALGORITHMS = ("RS256", "ES256", "ES384", "ES512", "ED25519")


@pytest.fixture(scope="session")
def key_pairs():
    """One key pair (plus an unrelated public key) per asymmetric algorithm."""
    return {algorithm: TestKeyFactory.key_pair(algorithm) for algorithm in ASYMMETRIC_ALGORITHMS}


@pytest.fixture(scope="session")
def weak_rsa_key():
    """RSA key below the minimum signing size."""
    return TestKeyFactory.rsa_private_key(key_size=1024)


@pytest.fixture
def registry():
    return AlgorithmRegistry.default()


@pytest.fixture
def signer(registry):
    """Signer pinned to FIXED_NOW."""
    return Signer(registry, clock=lambda: FIXED_NOW)


@pytest.fixture
def verifier(registry):
    """Verifier pinned to FIXED_NOW."""
    return Verifier(registry, clock=lambda: FIXED_NOW)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def secret():
    return SECRET
