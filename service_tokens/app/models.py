"""
Option and result models for the token engine and service.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidOptionsError
from .timespan import parse_duration

RESERVED_HEADER_FIELDS = ("alg", "typ")

OptionsT = TypeVar("OptionsT", bound=BaseModel)


def _as_tuple(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (str, re.Pattern)):
        return (value,)
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return value


def _check_duration(value: Any, option: str) -> Any:
    if value is None:
        return None
    try:
        parse_duration(value)
    except ValueError as exc:
        raise ValueError(f'"{option}" should be a number of seconds or string representing a timespan') from exc
    return value


class SignOptions(BaseModel):
    """Options accepted by ``sign``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    algorithm: str = Field(..., min_length=1, description="Registry or header name of the algorithm")
    expires_in: Optional[Union[int, str]] = Field(None, description="Lifetime added to iat")
    not_before: Optional[Union[int, str]] = Field(None, description="Activation delay added to iat")
    audience: Optional[Union[str, List[str]]] = None
    issuer: Optional[str] = None
    subject: Optional[str] = None
    jwt_id: Optional[str] = None
    key_id: Optional[str] = None
    header: Dict[str, Any] = Field(default_factory=dict, description="Additional header fields")
    no_timestamp: bool = False
    allow_unsigned: bool = False
    allow_insecure_key_sizes: bool = False

    @field_validator("expires_in")
    @classmethod
    def _validate_expires_in(cls, value):
        return _check_duration(value, "expiresIn")

    @field_validator("not_before")
    @classmethod
    def _validate_not_before(cls, value):
        return _check_duration(value, "notBefore")

    @field_validator("header")
    @classmethod
    def _validate_header(cls, value):
        reserved = [name for name in RESERVED_HEADER_FIELDS if name in value]
        if reserved:
            raise ValueError(f"header may not override {', '.join(reserved)}")
        return value


class VerifyOptions(BaseModel):
    """Options accepted by ``verify``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    algorithms: Tuple[str, ...] = Field(..., min_length=1, description="Allow-list of algorithm names")
    audience: Optional[Tuple[Any, ...]] = Field(None, description="Literals and/or compiled patterns")
    issuer: Optional[Tuple[str, ...]] = None
    subject: Optional[str] = None
    jwt_id: Optional[str] = None
    nonce: Optional[str] = Field(None, min_length=1)
    clock_tolerance: int = Field(0, ge=0)
    clock_timestamp: Optional[int] = Field(None, ge=0)
    ignore_expiration: bool = False
    ignore_not_before: bool = False
    max_age: Optional[Union[int, str]] = None
    complete: bool = False

    @field_validator("algorithms", "issuer", mode="before")
    @classmethod
    def _wrap_single(cls, value):
        return _as_tuple(value)

    @field_validator("issuer")
    @classmethod
    def _validate_issuer(cls, value):
        if value is not None and not value:
            raise ValueError("issuer must not be empty")
        return value

    @field_validator("audience", mode="before")
    @classmethod
    def _validate_audience(cls, value):
        value = _as_tuple(value)
        if value is None:
            return None
        if not isinstance(value, tuple) or not value:
            raise ValueError("audience must be a string, a pattern or a non-empty list of them")
        for item in value:
            if not isinstance(item, (str, re.Pattern)):
                raise ValueError("audience entries must be strings or compiled patterns")
        return value

    @field_validator("max_age")
    @classmethod
    def _validate_max_age(cls, value):
        return _check_duration(value, "maxAge")


def build_options(
    model: Type[OptionsT],
    options: Optional[Union[OptionsT, Mapping[str, Any]]],
    overrides: Mapping[str, Any],
) -> OptionsT:
    """Coerce a model, a mapping and keyword overrides into validated options."""
    if isinstance(options, model) and not overrides:
        return options

    if isinstance(options, model):
        data = options.model_dump()
    elif options is None:
        data = {}
    elif isinstance(options, Mapping):
        data = dict(options)
    else:
        raise InvalidOptionsError(
            "options must be a mapping",
            details={"type": type(options).__name__},
        )
    data.update(overrides)

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        message = "; ".join(f"{error['field']}: {error['message']}" for error in errors)
        raise InvalidOptionsError(f"invalid {model.__name__}: {message}", details={"errors": errors}) from exc


@dataclass(frozen=True)
class DecodedToken:
    """Header, payload and raw signature segment of a token."""
    header: Dict[str, Any]
    payload: Dict[str, Any]
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {"header": self.header, "payload": self.payload, "signature": self.signature}


class SignTokenRequest(BaseModel):
    """Request model for token issuing."""
    claims: Dict[str, Any] = Field(default_factory=dict)
    subject: Optional[str] = None
    audience: Optional[Union[str, List[str]]] = None
    expires_in: Optional[Union[int, str]] = None


class SignTokenResponse(BaseModel):
    """Response model for token issuing."""
    token: str
    token_type: str = "Bearer"


class TokenVerificationRequest(BaseModel):
    """Request model for token verification."""
    token: str


class TokenVerificationResponse(BaseModel):
    """Response model for token verification."""
    valid: bool
    claims: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    code: Optional[str] = None


class DecodeTokenRequest(BaseModel):
    """Request model for token inspection."""
    token: str
    complete: bool = False


class DecodeTokenResponse(BaseModel):
    """Response model for token inspection."""
    decoded: Optional[Dict[str, Any]] = None
