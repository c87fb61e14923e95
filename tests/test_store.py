"""Tests for the SQLAlchemy store helpers."""

from decimal import Decimal

import pytest
from sqlalchemy import text, update
from sqlalchemy.exc import OperationalError, StatementError

from marketplace.database.models import Profile
from marketplace.database.seed import seed
from marketplace.database.store import MarketplaceDB, _normalize_connection_string
from marketplace.errors import JobNotFound, TransientStoreError
from marketplace.services.payments import PaymentEngine


def _locked():
    return OperationalError("UPDATE jobs", {}, Exception("database is locked"))


def test_normalize_connection_string():
    assert _normalize_connection_string("  'postgresql://u@h/db' ") == "postgresql://u@h/db"
    assert _normalize_connection_string("psql 'postgresql://u@h/db'") == "postgresql://u@h/db"


def test_in_memory_store_shares_one_connection():
    db = MarketplaceDB("sqlite:///:memory:")
    db.create_tables()
    p = db.create_profile(first_name="A", last_name="B", profession="C", type="client", balance=1)
    assert db.get_profile(p.id).first_name == "A"
    db.dispose()


def test_conflict_is_retried_once(db):
    calls = []

    def work(session):
        calls.append(1)
        if len(calls) == 1:
            raise _locked()
        return "done"

    assert db.run_in_transaction(work) == "done"
    assert len(calls) == 2


def test_repeated_conflict_surfaces_as_transient_error(db):
    calls = []

    def work(session):
        calls.append(1)
        raise _locked()

    with pytest.raises(TransientStoreError):
        db.run_in_transaction(work)
    assert len(calls) == 2


def test_domain_errors_are_not_retried(db):
    calls = []

    def work(session):
        calls.append(1)
        raise JobNotFound()

    with pytest.raises(JobNotFound):
        db.run_in_transaction(work)
    assert len(calls) == 1


def test_failed_transaction_rolls_back(db, world, balance_of):
    def work(session):
        session.execute(update(Profile).where(Profile.id == world.alice.id).values(balance=0))
        raise JobNotFound()

    with pytest.raises(JobNotFound):
        db.run_in_transaction(work)
    assert balance_of(world.alice.id) == Decimal("100")


def test_ping(db):
    assert db.ping() is True


def test_seed_data_is_consistent(db, balance_of):
    counts = seed(db)
    assert counts == {"profiles": 8, "contracts": 9, "jobs": 14}

    harry = db.get_profile(1)
    PaymentEngine(db).pay_job(2, harry)
    assert balance_of(1) == Decimal("949")
    assert balance_of(6) == Decimal("1415")


def test_seed_leaves_ids_to_the_database(db):
    seed(db)
    newcomer = db.create_profile(first_name="New", last_name="Comer", profession="Buyer", type="client")
    contract = db.create_contract(client_id=newcomer.id, contractor_id=6)
    job = db.create_job(contract_id=contract.id, price=1)
    assert (newcomer.id, contract.id, job.id) == (9, 10, 15)


def test_money_is_stored_as_integer_cents(db):
    p = db.create_profile(first_name="A", last_name="B", profession="C", type="client", balance="0.3")
    with db.transaction() as s:
        raw = s.execute(text("SELECT balance FROM profiles WHERE id = :id"), {"id": p.id}).scalar_one()
    assert raw == 30
    assert db.get_profile(p.id).balance == Decimal("0.30")


def test_sub_cent_money_is_not_stored(db):
    with pytest.raises(StatementError):
        db.create_profile(first_name="A", last_name="B", profession="C", type="client", balance="0.004")
