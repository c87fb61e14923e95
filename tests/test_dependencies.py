"""Tests for the profile_id identity guard."""

import pytest
from starlette.requests import Request

from marketplace.api.dependencies import get_profile
from marketplace.errors import MissingIdentity, UnknownIdentity


def _request(headers=None):
    raw = [(k.encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


def test_resolves_profile_and_attaches_it(db, world):
    request = _request({"profile_id": str(world.alice.id)})
    profile = get_profile(request, db=db)
    assert profile.id == world.alice.id
    assert request.state.profile.id == world.alice.id


def test_whitespace_around_id_is_ignored(db, world):
    profile = get_profile(_request({"profile_id": f" {world.bob.id} "}), db=db)
    assert profile.type == "contractor"


def test_missing_header(db, world):
    with pytest.raises(MissingIdentity):
        get_profile(_request(), db=db)


def test_blank_header(db, world):
    with pytest.raises(MissingIdentity):
        get_profile(_request({"profile_id": "  "}), db=db)


@pytest.mark.parametrize("value", ["999", "1.5", "abc"])
def test_unknown_identity(db, world, value):
    with pytest.raises(UnknownIdentity):
        get_profile(_request({"profile_id": value}), db=db)
