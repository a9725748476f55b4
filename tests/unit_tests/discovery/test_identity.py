"""Property tests for path-derived identities."""

from __future__ import annotations

import uuid
from pathlib import Path

from hypothesis import given
from hypothesis import strategies as st

from image_converter.discovery.identity import identity_of

_paths = st.text(
    alphabet=st.characters(exclude_categories=("Cs",)), min_size=1, max_size=80
)


@given(_paths)
def test_identity_is_deterministic(path: str) -> None:
    """The same path string always yields the same identity."""
    assert identity_of(path) == identity_of(path)


@given(_paths, _paths)
def test_distinct_paths_get_distinct_identities(first: str, second: str) -> None:
    """Different path strings do not share an identity."""
    if first != second:
        assert identity_of(first) != identity_of(second)


@given(_paths)
def test_identity_is_a_version5_uuid(path: str) -> None:
    """Identities are canonical 36-character name-based UUIDs."""
    identity = identity_of(path)
    parsed = uuid.UUID(identity)
    assert parsed.version == 5
    assert str(parsed) == identity


def test_path_and_string_forms_agree() -> None:
    """``Path`` and ``str`` inputs describing the same path are interchangeable."""
    assert identity_of(Path("/in/a.jpg")) == identity_of("/in/a.jpg")
    assert identity_of("/in/a.jpg") == str(uuid.uuid5(uuid.NAMESPACE_URL, "/in/a.jpg"))
