#!/usr/bin/env python3
"""Shared pytest fixtures for the gqljson test suite."""

import json
import pathlib
import sys
from typing import Any, Dict, List

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from gqljson import Token, TokenKind, TokenSource
from tests.fixtures.generate_test_data import (
    generate_friends_payload,
    generate_people,
    generate_repository_response,
)


# ============================================================================
# Payload Fixtures
# ============================================================================

@pytest.fixture
def friends_json() -> str:
    """A small person document with two levels of friends."""
    return generate_friends_payload(3, 2)


@pytest.fixture
def friends_json_file(tmp_path) -> pathlib.Path:
    """A person document written to disk."""
    json_file = tmp_path / "friends.json"
    generate_friends_payload(10, 3, str(json_file))
    return json_file


@pytest.fixture
def repository_data() -> Dict[str, Any]:
    """The ``data`` member of a repository query response."""
    return generate_repository_response()


@pytest.fixture
def people() -> List[Dict[str, Any]]:
    return generate_people(5, 2)


@pytest.fixture
def hero_droid_json() -> str:
    return json.dumps({
        "hero": {
            "__typename": "Droid",
            "id": "2001",
            "name": "R2-D2",
            "primaryFunction": "Astromech",
            "appearsIn": ["NEWHOPE", "EMPIRE", "JEDI"],
            "createdAt": "1977-05-25",
            "revision": 3,
        }
    })


@pytest.fixture
def hero_human_json() -> str:
    return json.dumps({
        "hero": {
            "__typename": "Human",
            "id": "1000",
            "name": "Luke Skywalker",
            "height": 1.72,
            "mass": 77.25,
        }
    })


# ============================================================================
# Token Fixtures
# ============================================================================

@pytest.fixture
def make_source():
    """Build a TokenSource from (kind, value) pairs or bare kinds."""
    def build(*items) -> TokenSource:
        tokens = []
        for item in items:
            if isinstance(item, tuple):
                tokens.append(Token(*item))
            elif isinstance(item, TokenKind):
                tokens.append(Token(item))
            else:
                tokens.append(item)
        return TokenSource(tokens)
    return build


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "benchmark: marks benchmark tests")
