"""
Fixtures for interoperability tests.
"""

import pytest

from shared.test_helpers import MockTokenGenerator, TestClaims, TestKeyFactory


@pytest.fixture(scope="session")
def key_pairs():
    return {algorithm: TestKeyFactory.key_pair(algorithm) for algorithm in ("RS256", "ES256", "ES512", "ED25519")}


@pytest.fixture
def reference():
    """PyJWT-backed reference generator."""
    return MockTokenGenerator()


@pytest.fixture
def claims():
    return TestClaims()
