"""
Compact-format segment codec.

Segments are unpadded base64url. Decoding is strict: anything outside the
base64url alphabet, any ``=`` padding and any impossible length is a
``MalformedTokenError``.
"""

import base64
import json
import re
from typing import Any, Dict, Mapping, Tuple

from ..errors import JsonWebTokenError, MalformedTokenError

_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]*")


def encode_segment(data: bytes) -> str:
    """Encode bytes as unpadded base64url text."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_segment(segment: str) -> bytes:
    """Decode unpadded base64url text."""
    if not isinstance(segment, str) or not _SEGMENT_RE.fullmatch(segment) or len(segment) % 4 == 1:
        raise MalformedTokenError("jwt malformed", details={"reason": "invalid base64url segment"})
    try:
        return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except ValueError as exc:
        raise MalformedTokenError("jwt malformed", details={"reason": "invalid base64url segment"}) from exc


def canonical_json(value: Mapping[str, Any]) -> bytes:
    """Serialize a mapping to compact JSON, keeping key order."""
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise JsonWebTokenError("payload is not JSON serializable", details={"error": str(exc)}) from exc


def encode_json_segment(value: Mapping[str, Any]) -> str:
    return encode_segment(canonical_json(value))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_json_segment(segment: str, part: str) -> Dict[str, Any]:
    """Decode a header or payload segment into a JSON object.

    ``NaN`` and ``Infinity`` literals are rejected.
    """
    raw = decode_segment(segment)
    try:
        value = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedTokenError(f"invalid token {part}", details={"part": part}) from exc
    if not isinstance(value, dict):
        raise MalformedTokenError(f"invalid token {part}", details={"part": part})
    return value


def split_token(token: str) -> Tuple[str, str, str]:
    """Split a compact token into header, payload and signature segments.

    The header and payload segments must be non-empty. An empty signature
    segment is returned as ``""`` and left for the caller to judge, since
    unsigned tokens carry one.
    """
    if not isinstance(token, str):
        raise MalformedTokenError("jwt must be a string")
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError("jwt malformed", details={"segments": len(parts)})
    header_segment, payload_segment, signature_segment = parts
    if not header_segment or not payload_segment:
        raise MalformedTokenError("jwt malformed", details={"reason": "empty segment"})
    return header_segment, payload_segment, signature_segment


def join_segments(*segments: str) -> str:
    return ".".join(segments)
