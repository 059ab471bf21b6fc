"""Exceptions raised while decoding GraphQL JSON responses."""


class DecodeError(ValueError):
    """Base class for every decoding failure."""


class UnexpectedEndOfInput(DecodeError):
    def __init__(self, detail: str = ""):
        self.detail = detail
        msg = "unexpected end of JSON input"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class MalformedInput(DecodeError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"malformed JSON input: {detail}")


class NonAddressableTarget(DecodeError):
    def __init__(self, target):
        self.target_type = type(target).__name__
        super().__init__(f"cannot decode into non-addressable {self.target_type}")


class ExpectedObjectKey(DecodeError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"unexpected non-key {token!r} in JSON object")


class UnknownField(DecodeError):
    def __init__(self, key: str, places: int):
        self.key = key
        self.places = places
        super().__init__(
            f"field for {key!r} doesn't exist in any of {places} places to unmarshal"
        )


class NoSequenceTarget(DecodeError):
    def __init__(self, places: int):
        self.places = places
        super().__init__(f"list doesn't exist in any of {places} places to unmarshal")


class MismatchedDelimiter(DecodeError):
    def __init__(self, token, state=None):
        self.token = token
        self.state = state
        super().__init__(f"delimiter {token!r} doesn't close {state!r}")


class UnexpectedToken(DecodeError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"unexpected token {token!r} in JSON input")


class TypeMismatch(DecodeError):
    def __init__(self, target_type: str, token_kind):
        self.target_type = target_type
        self.token_kind = token_kind
        kind = getattr(token_kind, "value", token_kind)
        super().__init__(f"cannot unmarshal {kind} into value of type {target_type}")


class TrailingData(DecodeError):
    def __init__(self, token=None, detail: str = ""):
        self.token = token
        self.detail = detail
        found = repr(token) if token is not None else detail
        super().__init__(f"invalid token {found} after top-level value")
