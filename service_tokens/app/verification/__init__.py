"""
Token verification: structural parsing, claims validation and the verifier.
"""

from .claims import ClaimsValidator
from .parser import ParsedToken, decode, parse_token
from .verifier import Verifier

__all__ = [
    "ClaimsValidator",
    "ParsedToken",
    "Verifier",
    "decode",
    "parse_token",
]
