"""Scalar token to Python value conversion."""
import enum, math
from decimal import Decimal
from typing import Any

from .errors import TypeMismatch
from .schema import OptionalShape, ScalarShape, Shape, type_name, zero_value
from .tokens import Token, TokenKind


def number_from_text(text: str) -> Any:
    """int for integral JSON numbers, Decimal otherwise."""
    if any(c in text for c in ".eE"):
        return Decimal(text)
    return int(text)


def native(token: Token) -> Any:
    """The generic Python value of a scalar token."""
    if token.kind is TokenKind.NUMBER:
        return number_from_text(token.value)
    return token.value


def coerce(token: Token, shape: Shape) -> Any:
    """Convert scalar ``token`` to the type declared by ``shape``.

    Raises TypeMismatch when the token can't represent that type.
    """
    if token.kind is TokenKind.NULL:
        return zero_value(shape)
    if isinstance(shape, OptionalShape):
        return coerce(token, shape.inner)
    if not isinstance(shape, ScalarShape):
        raise TypeMismatch(type_name(shape), token.kind)

    tp, kind = shape.type, token.kind
    if tp is Any or tp is object:
        return native(token)
    if tp is bool:
        if kind is TokenKind.BOOL:
            return token.value
    elif tp is str:
        if kind is TokenKind.STRING:
            return token.value
    elif tp is int:
        if kind is TokenKind.NUMBER:
            try:
                return int(token.value)
            except ValueError:
                pass
    elif tp is float:
        if kind is TokenKind.NUMBER:
            value = float(token.value)
            # JSON has no infinities, so this is an overflow
            if not math.isinf(value):
                return value
    elif tp is Decimal:
        if kind is TokenKind.NUMBER:
            return Decimal(token.value)
    elif isinstance(tp, type) and issubclass(tp, enum.Enum):
        if kind is TokenKind.STRING:
            try:
                return tp(token.value)
            except ValueError:
                pass
    else:
        hook = getattr(tp, "from_graphql", None)
        if callable(hook):
            try:
                return hook(native(token))
            except (TypeError, ValueError) as e:
                raise TypeMismatch(type_name(shape), kind) from e
    raise TypeMismatch(type_name(shape), kind)
