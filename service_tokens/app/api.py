"""
Module-level token API.

The functions here share one frozen default registry. Async and callback
variants wrap the same synchronous core and add no validation of their own.
"""

import asyncio
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .algorithms import AlgorithmRegistry
from .models import DecodedToken, SignOptions, VerifyOptions, build_options
from .signing import Signer
from .verification import Verifier
from .verification import decode as _decode

Options = Optional[Union[Mapping[str, Any], SignOptions, VerifyOptions]]
Callback = Callable[[Optional[BaseException], Any], None]

default_registry = AlgorithmRegistry.default()
default_signer = Signer(default_registry)
default_verifier = Verifier(default_registry)


def sign(payload: Mapping[str, Any], key: Any, options: Options = None, **overrides: Any) -> str:
    """Sign ``payload`` and return a compact token."""
    return default_signer.sign(payload, key, build_options(SignOptions, options, overrides))


def verify(token: Any, key: Any, options: Options = None, **overrides: Any) -> Union[Dict[str, Any], DecodedToken]:
    """Verify ``token`` and return its payload, or the complete token when requested."""
    return default_verifier.verify(token, key, build_options(VerifyOptions, options, overrides))


def decode(token: Any, complete: bool = False) -> Optional[Union[Dict[str, Any], DecodedToken]]:
    """Decode without verifying. Returns ``None`` for malformed tokens."""
    return _decode(token, complete=complete)


async def sign_async(payload: Mapping[str, Any], key: Any, options: Options = None, **overrides: Any) -> str:
    return await asyncio.to_thread(sign, payload, key, options, **overrides)


async def verify_async(
    token: Any,
    key: Any,
    options: Options = None,
    **overrides: Any,
) -> Union[Dict[str, Any], DecodedToken]:
    return await asyncio.to_thread(verify, token, key, options, **overrides)


def _run_with_callback(operation: Callable[..., Any], callback: Callback, *args: Any, **kwargs: Any) -> None:
    try:
        result = operation(*args, **kwargs)
    except Exception as e:
        callback(e, None)
        return
    callback(None, result)


def sign_with_callback(
    payload: Mapping[str, Any],
    key: Any,
    options: Options = None,
    *,
    callback: Callback,
    **overrides: Any,
) -> None:
    """Sign and deliver ``(error, token)`` to ``callback`` exactly once."""
    _run_with_callback(sign, callback, payload, key, options, **overrides)


def verify_with_callback(
    token: Any,
    key: Any,
    options: Options = None,
    *,
    callback: Callback,
    **overrides: Any,
) -> None:
    """Verify and deliver ``(error, payload)`` to ``callback`` exactly once."""
    _run_with_callback(verify, callback, token, key, options, **overrides)
