"""Addressable slots inside a target structure."""
import dataclasses
from typing import Any, List, Optional, Union

from .errors import NonAddressableTarget
from .schema import FieldDescriptor, OptionalShape, RecordShape, SequenceShape, Shape, shape_of, zero_value


class Cursor:
    """A slot addressed by its parent cursor and an attribute name or list index.

    Reading through an unset optional parent yields None; writing allocates
    every unset parent on the way down.
    """

    __slots__ = ("parent", "key", "shape", "_box")

    def __init__(self, parent: Optional["Cursor"], key: Union[str, int], shape: Shape, box: Optional[List[Any]] = None):
        self.parent = parent
        self.key = key
        self.shape = shape
        self._box = box

    @classmethod
    def root(cls, target: Any) -> "Cursor":
        return cls(None, 0, shape_of(type(target)), box=[target])

    def __repr__(self) -> str:
        return f"Cursor({self.key!r}, {self.shape!r})"


    def get(self) -> Any:
        # walk down from the root, nesting depth is bounded by the input
        keys = []
        cursor = self
        while cursor.parent is not None:
            keys.append(cursor.key)
            cursor = cursor.parent
        keys.append(cursor.key)
        value = cursor._box
        for key in reversed(keys):
            if value is None:
                return None
            value = value[key] if isinstance(key, int) else getattr(value, key)
        return value

    def set(self, value: Any) -> None:
        container = self._box if self.parent is None else self.parent.materialize()
        if isinstance(self.key, int):
            container[self.key] = value
            return
        try:
            setattr(container, self.key, value)
        except dataclasses.FrozenInstanceError as e:
            raise NonAddressableTarget(container) from e

    def materialize(self) -> Any:
        """Return the value at this slot, allocating it first if it is unset."""
        value = self.get()
        if value is None:
            shape = self.shape.inner if isinstance(self.shape, OptionalShape) else self.shape
            value = zero_value(shape)
            self.set(value)
        return value

    def deref(self) -> "Cursor":
        """The same slot seen through its optional wrapper, if any."""
        if isinstance(self.shape, OptionalShape):
            return Cursor(self.parent, self.key, self.shape.inner, self._box)
        return self

    def field(self, fd: FieldDescriptor) -> "Cursor":
        return Cursor(self, fd.name, fd.shape)

    def append_element(self) -> "Cursor":
        """Append a zero element to the list at this slot and address it."""
        shape = self.shape
        assert isinstance(shape, SequenceShape)
        items = self.materialize()
        items.append(zero_value(shape.element))
        return Cursor(self, len(items) - 1, shape.element)

    @property
    def is_record(self) -> bool:
        return isinstance(self.shape, RecordShape)

    @property
    def is_sequence(self) -> bool:
        return isinstance(self.shape, SequenceShape)
