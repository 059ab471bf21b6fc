#!/usr/bin/env python3
"""Tests for tag parsing, shape classification and field tables."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pytest

from gqljson import Tag, describe, discover_fragments, parse_tag
from gqljson.cursor import Cursor
from gqljson.schema import (
    MapShape,
    OptionalShape,
    RecordShape,
    ScalarShape,
    SequenceShape,
    find_field,
    shape_of,
    type_name,
    zero_value,
)
from tests.fixtures.models import Character, Droid, Episode, LazyPet, OnDog, Person, Pet, Private


class TestTagGrammar:

    @pytest.mark.parametrize("tag,expected", [
        ("name", Tag("name", None, None, False)),
        ("  name  ", Tag("name", None, None, False)),
        ("hero(episode: EMPIRE)", Tag("hero", "episode: EMPIRE", None, False)),
        ("me: viewer", Tag("me", None, "viewer", False)),
        ("nodes: allNodes(first: 3)", Tag("nodes", "first: 3", "allNodes", False)),
        ("...", Tag(None, None, None, True)),
        ("... on Droid", Tag(None, None, None, True)),
        ("  ... on Human", Tag(None, None, None, True)),
    ])
    def test_parse_tag(self, tag, expected):
        assert parse_tag(tag) == expected


class TestShapes:

    @pytest.mark.parametrize("hint,expected", [
        (str, ScalarShape(str)),
        (Decimal, ScalarShape(Decimal)),
        (Any, ScalarShape(Any)),
        (Episode, ScalarShape(Episode)),
        (Person, RecordShape(Person)),
        (List[int], SequenceShape(ScalarShape(int))),
        (Sequence[Person], SequenceShape(RecordShape(Person))),
        (list, SequenceShape(ScalarShape(Any))),
        (Dict[str, Any], MapShape()),
        (Mapping[str, int], MapShape()),
        (dict, MapShape()),
        (Optional[int], OptionalShape(ScalarShape(int))),
        (Optional[List[Person]], OptionalShape(SequenceShape(RecordShape(Person)))),
    ])
    def test_shape_of(self, hint, expected):
        assert shape_of(hint) == expected

    def test_unions_are_rejected(self):
        with pytest.raises(TypeError):
            shape_of(Union[int, str])

    def test_non_string_map_keys_are_rejected(self):
        with pytest.raises(TypeError):
            shape_of(Dict[int, str])

    def test_type_name(self):
        assert type_name(shape_of(Optional[List[Person]])) == "Optional[list[Person]]"
        assert type_name(shape_of(Dict[str, Any])) == "dict[str, Any]"

    @pytest.mark.parametrize("hint,expected", [
        (str, ""),
        (int, 0),
        (float, 0.0),
        (bool, False),
        (Decimal, Decimal(0)),
        (Episode, None),
        (Optional[Person], None),
        (List[int], []),
        (Dict[str, Any], {}),
        (Person, Person()),
    ])
    def test_zero_value(self, hint, expected):
        assert zero_value(shape_of(hint)) == expected


class TestDescribe:

    def test_fields_in_declaration_order(self):
        assert [fd.name for fd in describe(Droid)] == [
            "node", "audited", "name", "primary_function", "appears_in",
        ]

    def test_fragment_and_embedded_flags(self):
        table = {fd.name: fd for fd in describe(Character)}
        assert table["on_droid"].is_fragment
        assert table["on_droid"].match_name is None
        assert not table["id"].is_fragment
        droid = {fd.name: fd for fd in describe(Droid)}
        assert droid["node"].is_embedded
        assert not droid["name"].is_embedded

    def test_fragments_never_match_by_name(self):
        assert find_field(Pet, "on_dog") is None
        assert find_field(Pet, "...") is None

    def test_private_fields_are_skipped(self):
        assert [fd.name for fd in describe(Private)] == ["name"]

    def test_first_match_wins(self):
        @dataclass
        class Twice:
            first: str = ""
            First: str = ""

        assert find_field(Twice, "FIRST").name == "first"

    def test_describe_is_cached(self):
        assert describe(Person) is describe(Person)

    def test_rejects_non_dataclasses(self):
        with pytest.raises(TypeError):
            describe(int)


class TestFragmentDiscovery:

    def test_finds_nested_embedded_records(self):
        found = discover_fragments([Cursor.root(Character())])
        assert [c.key for c in found] == ["on_droid", "on_human", "node", "audited", "timestamps"]

    def test_looks_through_optional_fragments(self):
        found = discover_fragments([Cursor.root(LazyPet())])
        assert [c.key for c in found] == ["on_dog", "on_cat"]
        assert isinstance(found[0].shape, OptionalShape)

    def test_ignores_plain_nested_records(self):
        @dataclass
        class Outer:
            pet: Pet = None
            dog: OnDog = None

        assert discover_fragments([Cursor.root(Outer())]) == []

    def test_ignores_non_records(self):
        assert discover_fragments([Cursor(None, 0, ScalarShape(str), box=["x"])]) == []
