"""
Tests for the module-level API and its async and callback variants.
"""

from unittest.mock import MagicMock

import pytest

from service_tokens.app import api
from service_tokens.app.errors import (
    InvalidOptionsError,
    InvalidSignatureError,
    TokenExpiredError,
)
from service_tokens.app.models import SignOptions, VerifyOptions


class TestOptionForms:
    """Options as a model, a mapping or keyword overrides."""

    def test_model_mapping_and_kwargs_agree(self, secret):
        token = api.sign({"foo": "bar"}, secret, SignOptions(algorithm="HS256", no_timestamp=True))

        assert token == api.sign({"foo": "bar"}, secret, {"algorithm": "HS256", "no_timestamp": True})
        assert token == api.sign({"foo": "bar"}, secret, algorithm="HS256", no_timestamp=True)

    def test_kwargs_override_model(self, secret):
        token = api.sign({"foo": "bar"}, secret, SignOptions(algorithm="HS256"), subject="user-1")

        assert api.verify(token, secret, VerifyOptions(algorithms=["HS256"]), subject="user-1")["sub"] == "user-1"

    def test_allow_list_is_required(self, secret):
        token = api.sign({}, secret, algorithm="HS256")

        with pytest.raises(InvalidOptionsError) as exc_info:
            api.verify(token, secret)
        assert exc_info.value.code == "INVALID_OPTIONS"

        with pytest.raises(InvalidOptionsError):
            api.verify(token, secret, algorithms=[])

    def test_bare_string_allow_list(self, secret):
        token = api.sign({"foo": "bar"}, secret, algorithm="HS256")
        assert api.verify(token, secret, algorithms="HS256")["foo"] == "bar"

    @pytest.mark.parametrize("overrides", [
        {"clock_tolerance": -1},
        {"max_age": "forever"},
        {"nonce": ""},
        {"audience": []},
        {"audience": [42]},
        {"ignoreExpiration": True},
    ])
    def test_invalid_verify_options(self, secret, overrides):
        with pytest.raises(InvalidOptionsError):
            api.verify("a.b.c", secret, algorithms=["HS256"], **overrides)

    def test_options_must_be_a_mapping(self, secret):
        with pytest.raises(InvalidOptionsError):
            api.verify("a.b.c", secret, ["HS256"])


class TestAsyncVariants:
    """Async wrappers return what the sync core returns."""

    @pytest.mark.asyncio
    async def test_sign_and_verify(self, secret):
        token = await api.sign_async({"foo": "bar"}, secret, algorithm="HS256", no_timestamp=True)

        assert token == api.sign({"foo": "bar"}, secret, algorithm="HS256", no_timestamp=True)
        assert await api.verify_async(token, secret, algorithms=["HS256"]) == {"foo": "bar"}

    @pytest.mark.asyncio
    async def test_errors_are_raised(self, secret):
        token = await api.sign_async({}, secret, algorithm="HS256", expires_in=-10)

        with pytest.raises(TokenExpiredError):
            await api.verify_async(token, secret, algorithms=["HS256"])

        with pytest.raises(InvalidSignatureError):
            await api.verify_async(
                token, secret + "x", algorithms=["HS256"], ignore_expiration=True,
            )


class TestCallbackVariants:
    """Callbacks receive (error, result) exactly once."""

    def test_sign_callback(self, secret):
        callback = MagicMock()

        api.sign_with_callback({"foo": "bar"}, secret, algorithm="HS256", callback=callback)

        callback.assert_called_once()
        err, token = callback.call_args.args
        assert err is None
        assert api.verify(token, secret, algorithms=["HS256"])["foo"] == "bar"

    def test_sign_callback_error(self, secret):
        callback = MagicMock()

        api.sign_with_callback({"exp": 1}, secret, algorithm="HS256", expires_in=10, callback=callback)

        callback.assert_called_once()
        err, token = callback.call_args.args
        assert err.code == "CLAIM_CONFLICT"
        assert token is None

    def test_verify_callback(self, secret):
        token = api.sign({"foo": "bar"}, secret, algorithm="HS256")
        callback = MagicMock()

        api.verify_with_callback(token, secret, {"algorithms": ["HS256"]}, callback=callback)

        callback.assert_called_once()
        err, decoded = callback.call_args.args
        assert err is None
        assert decoded["foo"] == "bar"

    def test_verify_callback_error(self, secret):
        callback = MagicMock()

        api.verify_with_callback("fruit.fruit.fruit", secret, algorithms=["HS256"], callback=callback)

        callback.assert_called_once()
        err, decoded = callback.call_args.args
        assert err.code == "MALFORMED_TOKEN"
        assert decoded is None
