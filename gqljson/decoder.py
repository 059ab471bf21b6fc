"""Decode JSON into GraphQL query data structures.

The decoder is driven by a JSON token stream. Because a single JSON object
may have to populate several targets at once (inline fragments on
interfaces and unions, embedded records), it keeps a list of branches, each a
stack of cursors. The top of every branch is where that branch stores the
next JSON value.
"""
import collections, dataclasses, logging
from typing import Any, Deque, Iterable, List, Optional, Tuple

from ijson.common import ObjectBuilder

from .coerce import coerce, native
from .cursor import Cursor
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
from .schema import MapShape, describe, find_field, new, type_name, zero_value
from .tokens import SCALAR_KINDS, Token, TokenKind, TokenSource

logger = logging.getLogger(__name__)

Branch = List[Optional[Cursor]]  # None marks a slot this branch ignores

_CLOSES = {TokenKind.OBJ_END: TokenKind.OBJ_BEGIN, TokenKind.ARR_END: TokenKind.ARR_BEGIN}


def _is_addressable(target: Any) -> bool:
    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        return False
    return not type(target).__dataclass_params__.frozen


def discover_fragments(frontier: Iterable[Cursor]) -> List[Cursor]:
    """Find fragment and embedded fields reachable from ``frontier``.

    Each one found is explored in turn, so nested fragments are all returned,
    breadth first. Plain nested records are not searched.
    """
    queue: Deque[Cursor] = collections.deque(frontier)
    found: List[Cursor] = []
    while queue:
        cursor = queue.popleft().deref()
        if not cursor.is_record:
            continue
        for fd in describe(cursor.shape.cls):
            if fd.is_fragment or fd.is_embedded:
                child = cursor.field(fd)
                found.append(child)
                queue.append(child)
    return found


class Decoder:
    """Decodes one JSON value at a time from a TokenSource."""

    def __init__(self, source: TokenSource):
        self.source = source
        # open objects and arrays, innermost last
        self._parse_state: List[TokenKind] = []
        self._branches: List[Branch] = []

    def decode(self, target: Any) -> None:
        """Decode the next JSON value into dataclass instance ``target``."""
        if not _is_addressable(target):
            raise NonAddressableTarget(target)
        self._parse_state = []
        self._branches = [[Cursor.root(target)]]
        self._decode()

    def ensure_consumed(self) -> None:
        """Raise TrailingData unless the input ends after the decoded value."""
        try:
            tok = self.source.token()
        except (MalformedInput, UnexpectedEndOfInput) as e:
            raise TrailingData(detail=e.detail) from e
        if tok is not None:
            raise TrailingData(tok)

    # -- token helpers -----------------------------------------------------

    def _next_token(self) -> Token:
        tok = self.source.token()
        if tok is None:
            raise UnexpectedEndOfInput()
        if not isinstance(tok, Token):
            raise UnexpectedToken(tok)
        return tok

    def _state(self) -> Optional[TokenKind]:
        return self._parse_state[-1] if self._parse_state else None

    def _inside_object(self, tok: Token) -> bool:
        return self._state() is TokenKind.OBJ_BEGIN and tok.kind is not TokenKind.OBJ_END

    def _inside_array(self, tok: Token) -> bool:
        return self._state() is TokenKind.ARR_BEGIN and tok.kind is not TokenKind.ARR_END

    # -- main loop ---------------------------------------------------------

    def _decode(self) -> None:
        # Loop invariant: the top of each branch is where the next JSON value goes.
        while self._branches:
            tok = self._next_token()

            if self._inside_object(tok):
                if tok.kind is not TokenKind.STRING:
                    raise ExpectedObjectKey(tok)
                if self._select_field(tok.value):
                    continue
                # the key is consumed, carry on with its value
                tok = self._next_token()
            elif self._inside_array(tok):
                self._select_element()

            if tok.kind in SCALAR_KINDS:
                self._store(tok)
                self._pop_all()
            elif tok.kind is TokenKind.OBJ_BEGIN:
                self._parse_state.append(tok.kind)
                self._begin_object()
            elif tok.kind is TokenKind.ARR_BEGIN:
                self._parse_state.append(tok.kind)
                self._begin_array()
            elif tok.kind in _CLOSES:
                if self._state() is not _CLOSES[tok.kind]:
                    raise MismatchedDelimiter(tok, self._state())
                self._pop_all()
                self._parse_state.pop()
            else:
                raise UnexpectedToken(tok)

    def _select_field(self, key: str) -> bool:
        """Push the field named ``key`` on every branch.

        Returns True when the value went into a map field and has already
        been consumed.
        """
        matched = False
        maps: List[Cursor] = []
        selected: List[Optional[Cursor]] = []
        for branch in self._branches:
            top = branch[-1]
            target = top.deref() if top is not None else None
            f = None
            if target is not None and target.is_record:
                fd = find_field(target.shape.cls, key)
                if fd is not None:
                    matched = True
                    f = target.field(fd)
                    if isinstance(f.deref().shape, MapShape):
                        maps.append(f)
            selected.append(f)

        if not matched:
            raise UnknownField(key, len(self._branches))

        if maps:
            kind, value = self._read_generic()
            for f in maps:
                if kind is TokenKind.NULL:
                    f.set(zero_value(f.shape))
                elif kind is TokenKind.OBJ_BEGIN:
                    f.set(value)
                else:
                    raise TypeMismatch(type_name(f.shape), kind)
            return True

        for branch, f in zip(self._branches, selected):
            branch.append(f)
        return False

    def _select_element(self) -> None:
        """Append a new element to every list on top of a branch and push it."""
        found = False
        for branch in self._branches:
            top = branch[-1]
            elem = None
            if top is not None and top.deref().is_sequence:
                elem = top.deref().append_element()
                found = True
            branch.append(elem)
        if not found:
            raise NoSequenceTarget(len(self._branches))

    def _store(self, tok: Token) -> None:
        for branch in self._branches:
            top = branch[-1]
            if top is None:
                continue
            top.set(coerce(tok, top.shape))

    def _begin_object(self) -> None:
        frontier = []
        for branch in self._branches:
            top = branch[-1]
            if top is None:
                continue
            target = top.deref()
            if target.is_record:
                target.materialize()
            frontier.append(target)
        found = discover_fragments(frontier)
        if found:
            logger.debug("object adds %d fragment/embedded targets to %d branches",
                         len(found), len(self._branches))
        self._branches.extend([f] for f in found)

    def _begin_array(self) -> None:
        for branch in self._branches:
            top = branch[-1]
            if top is None:
                continue
            target = top.deref()
            if target.is_sequence:
                # start over, the target may hold a previous decode
                target.set([])

    def _pop_all(self) -> None:
        """Pop every branch, dropping those that become empty."""
        branches = []
        for branch in self._branches:
            branch.pop()
            if branch:
                branches.append(branch)
        self._branches = branches

    def _read_generic(self) -> Tuple[TokenKind, Any]:
        """Read one whole JSON value into plain dicts, lists and scalars."""
        builder = ObjectBuilder()
        first = tok = self._next_token()
        stack: List[List[Any]] = []  # [open kind, expecting key]
        while True:
            if stack and stack[-1][0] is TokenKind.OBJ_BEGIN and stack[-1][1] \
                    and tok.kind is not TokenKind.OBJ_END:
                if tok.kind is not TokenKind.STRING:
                    raise ExpectedObjectKey(tok)
                builder.event("map_key", tok.value)
                stack[-1][1] = False
            else:
                if stack and stack[-1][0] is TokenKind.OBJ_BEGIN:
                    stack[-1][1] = True
                if tok.kind in _CLOSES:
                    if not stack or stack[-1][0] is not _CLOSES[tok.kind]:
                        raise MismatchedDelimiter(tok, stack[-1][0] if stack else None)
                    stack.pop()
                    builder.event(tok.kind.value, None)
                elif tok.kind in (TokenKind.OBJ_BEGIN, TokenKind.ARR_BEGIN):
                    stack.append([tok.kind, True])
                    builder.event(tok.kind.value, None)
                elif tok.kind in SCALAR_KINDS:
                    builder.event(tok.kind.value, native(tok))
                else:
                    raise UnexpectedToken(tok)
            if not stack:
                return first.kind, builder.value
            tok = self._next_token()


def unmarshal_data(data, target: Any, backend: Optional[str] = None, buf_size: Optional[int] = None) -> None:
    """Parse JSON-encoded GraphQL response data into dataclass ``target``.

    ``data`` may be bytes, str or a binary file. The whole input must be a
    single JSON value. On failure ``target`` is left partially populated.
    """
    decoder = Decoder(TokenSource.from_json(data, backend=backend, buf_size=buf_size))
    try:
        decoder.decode(target)
        decoder.ensure_consumed()
    except DecodeError as e:
        logger.error(f"decode into {type(target).__name__} failed: {e}")
        raise


def loads(data, cls: type, **kwargs) -> Any:
    """Decode ``data`` into a new instance of dataclass ``cls`` and return it."""
    target = new(cls)
    unmarshal_data(data, target, **kwargs)
    return target
