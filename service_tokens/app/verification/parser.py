"""
Structural parsing shared by ``verify`` and ``decode``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..encoding import decode_json_segment, decode_segment, split_token
from ..errors import MalformedTokenError
from ..models import DecodedToken

UNSIGNED_ALGORITHM = "none"


@dataclass(frozen=True)
class ParsedToken:
    """A structurally valid token. Nothing about it is trusted yet."""
    header: Dict[str, Any]
    payload: Dict[str, Any]
    header_segment: str
    payload_segment: str
    signature_segment: str
    signature: bytes

    @property
    def algorithm(self) -> str:
        return self.header["alg"]

    @property
    def signing_input(self) -> bytes:
        return f"{self.header_segment}.{self.payload_segment}".encode("ascii")

    def decoded(self) -> DecodedToken:
        return DecodedToken(header=self.header, payload=self.payload, signature=self.signature_segment)


def parse_token(token: Any) -> ParsedToken:
    """Split and decode a token without touching any key material.

    Raises ``MalformedTokenError`` for anything that is not three base64url
    segments carrying JSON objects, for a header without a string ``alg``,
    and for an empty signature on a token that does not declare ``none``.
    """
    if not isinstance(token, str) or not token:
        raise MalformedTokenError("jwt must be provided")

    header_segment, payload_segment, signature_segment = split_token(token)
    header = decode_json_segment(header_segment, "header")
    payload = decode_json_segment(payload_segment, "payload")

    algorithm = header.get("alg")
    if not isinstance(algorithm, str) or not algorithm:
        raise MalformedTokenError("invalid token header", details={"reason": "missing alg"})
    if not signature_segment and algorithm != UNSIGNED_ALGORITHM:
        raise MalformedTokenError("jwt signature is required")

    signature = decode_segment(signature_segment)
    return ParsedToken(
        header=header,
        payload=payload,
        header_segment=header_segment,
        payload_segment=payload_segment,
        signature_segment=signature_segment,
        signature=signature,
    )


def decode(token: Any, complete: bool = False) -> Optional[Union[Dict[str, Any], DecodedToken]]:
    """Inspect a token without verifying it.

    Returns ``None`` for malformed input. The result is not authenticated
    and must never stand in for ``verify``.
    """
    try:
        parsed = parse_token(token)
    except MalformedTokenError:
        return None
    if complete:
        return parsed.decoded()
    return parsed.payload
