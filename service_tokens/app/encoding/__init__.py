"""
Base64url segment codec and compact-format split/join.
"""

from .segments import (
    canonical_json,
    decode_json_segment,
    decode_segment,
    encode_json_segment,
    encode_segment,
    join_segments,
    split_token,
)

__all__ = [
    "canonical_json",
    "decode_json_segment",
    "decode_segment",
    "encode_json_segment",
    "encode_segment",
    "join_segments",
    "split_token",
]
