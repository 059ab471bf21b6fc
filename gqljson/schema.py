"""Static description of dataclass targets: tags, shapes and field tables."""
import dataclasses, functools, logging, typing
from collections import abc
from decimal import Decimal
from typing import Any, List, NamedTuple, Optional, Tuple, Union

logger = logging.getLogger(__name__)

GRAPHQL_TAG = "graphql"
EMBEDDED = "embedded"

try:
    from types import UnionType
    _UNION_TYPES: Tuple[Any, ...] = (Union, UnionType)
except ImportError:  # Python < 3.10
    _UNION_TYPES = (Union,)

_NONE = type(None)
_SEQUENCE_ORIGINS = (list, abc.Sequence, abc.MutableSequence)
_MAP_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


# ---------------------------------------------------------------------------
# Tag grammar:  name[(args)][: alias]   or   ...[ on Type]
# ---------------------------------------------------------------------------

class Tag(NamedTuple):
    name: Optional[str]  # None for fragments
    arguments: Optional[str]
    alias: Optional[str]
    is_fragment: bool


def parse_tag(tag: str) -> Tag:
    value = tag.strip()
    if value.startswith("..."):
        return Tag(None, None, None, True)
    arguments = None
    if "(" in value:
        value, _, rest = value.partition("(")
        arguments = rest.rsplit(")", 1)[0].strip()
    alias = None
    if ":" in value:
        value, _, alias = value.partition(":")
        alias = alias.strip()
    return Tag(value.strip(), arguments, alias, False)


def gql(tag: str, **kwargs) -> Any:
    """A dataclass field decoded from the JSON key named by ``tag``."""
    kwargs["metadata"] = {**kwargs.get("metadata", {}), GRAPHQL_TAG: tag}
    return dataclasses.field(**kwargs)


def fragment(on: str = "", **kwargs) -> Any:
    """A dataclass field holding an inline fragment, ``... on <on>``."""
    return gql(f"... on {on}" if on else "...", **kwargs)


def embedded(**kwargs) -> Any:
    """A dataclass field whose own fields are matched against the parent object."""
    kwargs["metadata"] = {**kwargs.get("metadata", {}), EMBEDDED: True}
    return dataclasses.field(**kwargs)


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

@dataclasses.dataclass(frozen=True)
class ScalarShape:
    type: Any


@dataclasses.dataclass(frozen=True)
class RecordShape:
    cls: type


@dataclasses.dataclass(frozen=True)
class SequenceShape:
    element: "Shape"


@dataclasses.dataclass(frozen=True)
class MapShape:
    """A str-keyed mapping, always filled with the generic JSON object."""


@dataclasses.dataclass(frozen=True)
class OptionalShape:
    inner: "Shape"


Shape = Union[ScalarShape, RecordShape, SequenceShape, MapShape, OptionalShape]


def shape_of(hint: Any) -> Shape:
    """Classify a type hint into its shape category."""
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in _UNION_TYPES:
        members = [a for a in args if a is not _NONE]
        if len(members) != 1:
            raise TypeError(f"unsupported union type {hint!r}")
        return OptionalShape(shape_of(members[0]))
    if hint in _SEQUENCE_ORIGINS or origin in _SEQUENCE_ORIGINS:
        return SequenceShape(shape_of(args[0]) if args else ScalarShape(Any))
    if hint in _MAP_ORIGINS or origin in _MAP_ORIGINS:
        if args and args[0] is not str:
            raise TypeError(f"map keys must be str, got {hint!r}")
        return MapShape()
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return RecordShape(hint)
    return ScalarShape(hint)


def type_name(shape: Shape) -> str:
    if isinstance(shape, OptionalShape):
        return f"Optional[{type_name(shape.inner)}]"
    if isinstance(shape, SequenceShape):
        return f"list[{type_name(shape.element)}]"
    if isinstance(shape, MapShape):
        return "dict[str, Any]"
    if isinstance(shape, RecordShape):
        return shape.cls.__name__
    return getattr(shape.type, "__name__", repr(shape.type))


# ---------------------------------------------------------------------------
# Field descriptors
# ---------------------------------------------------------------------------

def _fold(name: str) -> str:
    return name.replace("_", "").casefold()


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    name: str
    tag: Optional[str]
    match_name: Optional[str]
    is_fragment: bool
    is_embedded: bool
    shape: Shape

    def matches(self, key: str) -> bool:
        """Report whether JSON object ``key`` names this field."""
        if self.tag is not None:
            # fragments have no name of their own
            return self.match_name is not None and self.match_name == key
        return self.name.casefold() == key.casefold() or _fold(self.name) == _fold(key)


@functools.lru_cache(maxsize=None)
def describe(cls: type) -> Tuple[FieldDescriptor, ...]:
    """Build the field table for dataclass ``cls``, in declaration order."""
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")
    hints = typing.get_type_hints(cls)
    table: List[FieldDescriptor] = []
    for f in dataclasses.fields(cls):
        if f.name.startswith("_"):
            continue
        tag = f.metadata.get(GRAPHQL_TAG)
        parsed = parse_tag(tag) if tag is not None else None
        table.append(FieldDescriptor(
            name=f.name,
            tag=tag,
            match_name=parsed.name if parsed else None,
            is_fragment=bool(parsed and parsed.is_fragment),
            is_embedded=bool(f.metadata.get(EMBEDDED, False)),
            shape=shape_of(hints[f.name]),
        ))
    logger.debug("described %s: %d fields", cls.__name__, len(table))
    return tuple(table)


def find_field(cls: type, key: str) -> Optional[FieldDescriptor]:
    """First field of ``cls`` matching ``key``, or None."""
    for fd in describe(cls):
        if fd.matches(key):
            return fd
    return None


# ---------------------------------------------------------------------------
# Zero values
# ---------------------------------------------------------------------------

_SCALAR_ZEROS = {str: str, int: int, float: float, bool: bool, Decimal: Decimal}


def zero_value(shape: Shape) -> Any:
    if isinstance(shape, OptionalShape):
        return None
    if isinstance(shape, SequenceShape):
        return []
    if isinstance(shape, MapShape):
        return {}
    if isinstance(shape, RecordShape):
        return new(shape.cls)
    factory = _SCALAR_ZEROS.get(shape.type)
    return factory() if factory else None


def new(cls: type) -> Any:
    """Instantiate ``cls``, filling fields that lack defaults with zero values."""
    hints = typing.get_type_hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            kwargs[f.name] = zero_value(shape_of(hints[f.name]))
    return cls(**kwargs)
