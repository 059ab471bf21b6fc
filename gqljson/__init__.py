"""Decode JSON GraphQL responses into dataclass query structures."""

from .decoder import Decoder, discover_fragments, loads, unmarshal_data
from .errors import (
    DecodeError,
    ExpectedObjectKey,
    MalformedInput,
    MismatchedDelimiter,
    NoSequenceTarget,
    NonAddressableTarget,
    TrailingData,
    TypeMismatch,
    UnexpectedEndOfInput,
    UnexpectedToken,
    UnknownField,
)
from .schema import FieldDescriptor, Tag, describe, embedded, fragment, gql, new, parse_tag
from .tokens import Token, TokenKind, TokenSource

__all__ = [
    "unmarshal_data",
    "loads",
    "Decoder",
    "discover_fragments",
    "TokenSource",
    "Token",
    "TokenKind",
    "gql",
    "fragment",
    "embedded",
    "new",
    "describe",
    "parse_tag",
    "Tag",
    "FieldDescriptor",
    "DecodeError",
    "ExpectedObjectKey",
    "MalformedInput",
    "MismatchedDelimiter",
    "NoSequenceTarget",
    "NonAddressableTarget",
    "TrailingData",
    "TypeMismatch",
    "UnexpectedEndOfInput",
    "UnexpectedToken",
    "UnknownField",
]
