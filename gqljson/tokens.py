"""JSON token stream built on the ijson event parser."""
import codecs, enum, io, logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

import ijson

from .config import Config
from .errors import MalformedInput, UnexpectedEndOfInput, UnexpectedToken

logger = logging.getLogger(__name__)


class TokenKind(enum.Enum):
    """Token kinds, valued by the matching ijson event name."""
    STRING = "string"
    NUMBER = "number"
    BOOL = "boolean"
    NULL = "null"
    OBJ_BEGIN = "start_map"
    OBJ_END = "end_map"
    ARR_BEGIN = "start_array"
    ARR_END = "end_array"


SCALAR_KINDS = frozenset({TokenKind.STRING, TokenKind.NUMBER, TokenKind.BOOL, TokenKind.NULL})

_EVENT_KINDS = {kind.value: kind for kind in TokenKind}
_EVENT_KINDS["map_key"] = TokenKind.STRING


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: Any = None  # numbers are kept as their JSON text

    def __repr__(self) -> str:
        if self.kind in SCALAR_KINDS:
            return f"{self.kind.value}({self.value!r})"
        return self.kind.value


def tokens_from_events(events: Iterable) -> Iterator[Token]:
    """Turn ijson ``basic_parse`` (event, value) pairs into tokens."""
    for event, value in events:
        kind = _EVENT_KINDS.get(event)
        if kind is None:
            raise UnexpectedToken(event)
        if kind is TokenKind.NUMBER:
            value = str(value)
        yield Token(kind, value)


def _basic_parse(parser, f, buf_size: int) -> Iterator[tuple]:
    """Push ``f`` through an ijson parser coroutine, chunk by chunk.

    Events parsed before an error are yielded before the error is raised, so
    a bad trailer never hides the value in front of it. Only a failure while
    closing the parser counts as the input ending early.
    """
    events = ijson.sendable_list()
    coro = parser.basic_parse_coro(events)
    utf8 = codecs.getincrementaldecoder("utf-8")()
    while True:
        chunk = f.read(buf_size)
        bad_bytes = None
        if chunk:
            try:
                utf8.decode(chunk)
            except UnicodeDecodeError as e:
                # e.object is the decoder's pending tail plus this chunk
                bad_bytes = e
                chunk = chunk[:max(0, e.start - (len(e.object) - len(chunk)))]
        closing = not chunk and bad_bytes is None
        error = cause = None
        try:
            if chunk:
                coro.send(chunk)
            elif closing:
                coro.close()
        except StopIteration:
            closing = True
        except ijson.IncompleteJSONError as e:
            error = UnexpectedEndOfInput(str(e)) if closing else MalformedInput(str(e))
            cause = e
        except (ijson.JSONError, UnicodeDecodeError) as e:
            error, cause = MalformedInput(str(e)), e
        yield from events
        del events[:]
        if error is None and bad_bytes is not None:
            error, cause = MalformedInput(str(bad_bytes)), bad_bytes
        if error is not None:
            raise error from cause
        if closing:
            return


class TokenSource:
    """Hands out one token at a time from an underlying token iterator."""

    def __init__(self, tokens: Iterable[Token]):
        self._tokens = iter(tokens)

    @classmethod
    def from_json(cls, data, backend: Optional[str] = None, buf_size: Optional[int] = None) -> "TokenSource":
        """Tokenize ``bytes``, ``str`` or a binary file-like object lazily."""
        if isinstance(data, str):
            # lone surrogates survive encoding and are rejected as malformed UTF-8
            data = data.encode("utf-8", "surrogatepass")
        if isinstance(data, (bytes, bytearray, memoryview)):
            data = io.BytesIO(bytes(data))
        backend = backend or Config.BACKEND
        logger.debug("tokenizing with ijson backend %s", backend)
        parser = ijson.get_backend(backend)
        events = _basic_parse(parser, data, buf_size or Config.BUF_SIZE)
        return cls(tokens_from_events(events))

    def token(self) -> Optional[Token]:
        """Return the next token, or None once the input ended cleanly."""
        try:
            return next(self._tokens)
        except StopIteration:
            return None
