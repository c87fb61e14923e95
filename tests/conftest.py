"""Pytest fixtures: a fresh SQLite store per test plus a small marketplace."""

from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from marketplace.api.main import create_app
from marketplace.database.store import MarketplaceDB
from marketplace.utils.config_loader import AppConfig


@pytest.fixture
def db(tmp_path):
    """File-backed SQLite store so worker threads share one database."""
    store = MarketplaceDB(f"sqlite:///{tmp_path / 'marketplace.sqlite3'}", sqlite_timeout=10)
    store.create_tables()
    yield store
    store.dispose()


@pytest.fixture
def world(db):
    """
    Two clients, two contractors, and contracts in each status.

    alice (client, 100) -> bob (contractor, 10): in_progress, jobs 50 and 30 unpaid, 20 paid
    alice -> carol (contractor, 0): new, job 40 unpaid
    dave (client, 5) -> carol: in_progress, job 10 unpaid
    dave -> bob: terminated, job 70 unpaid
    """
    alice = db.create_profile(first_name="Alice", last_name="Adams", profession="Founder", type="client", balance=100)
    dave = db.create_profile(first_name="Dave", last_name="Dunn", profession="Manager", type="client", balance=5)
    bob = db.create_profile(first_name="Bob", last_name="Baker", profession="Programmer", type="contractor", balance=10)
    carol = db.create_profile(first_name="Carol", last_name="Cole", profession="Designer", type="contractor", balance=0)

    active = db.create_contract(client_id=alice.id, contractor_id=bob.id, status="in_progress", terms="build api",
                                created_at=datetime(2024, 3, 10, 12, 0))
    fresh = db.create_contract(client_id=alice.id, contractor_id=carol.id, status="new", terms="logo",
                               created_at=datetime(2024, 3, 11, 9, 0))
    small = db.create_contract(client_id=dave.id, contractor_id=carol.id, status="in_progress", terms="banner",
                               created_at=datetime(2024, 3, 12, 15, 30))
    ended = db.create_contract(client_id=dave.id, contractor_id=bob.id, status="terminated", terms="old work",
                               created_at=datetime(2024, 1, 5, 8, 0))

    return SimpleNamespace(
        alice=alice,
        dave=dave,
        bob=bob,
        carol=carol,
        active=active,
        fresh=fresh,
        small=small,
        ended=ended,
        job_big=db.create_job(contract_id=active.id, price=50, description="backend"),
        job_small=db.create_job(contract_id=active.id, price=30, description="tests"),
        job_done=db.create_job(contract_id=active.id, price=20, description="design doc", paid=True,
                               payment_date=datetime(2024, 3, 15)),
        job_new=db.create_job(contract_id=fresh.id, price=40, description="sketches"),
        job_dave=db.create_job(contract_id=small.id, price=10, description="banner"),
        job_ended=db.create_job(contract_id=ended.id, price=70, description="legacy"),
    )


@pytest.fixture
def app(db):
    return create_app(db=db, config=AppConfig())


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def balance_of(db):
    """Current stored balance of a profile."""
    return lambda profile_id: db.get_profile(profile_id).balance
