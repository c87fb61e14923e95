"""Tests for contract lookups and unpaid job listings."""

import pytest

from marketplace.errors import ContractNotFound, Unauthorized
from marketplace.services.contracts import ContractsController


@pytest.fixture
def controller(db):
    return ContractsController(db)


def test_get_contract_for_client_and_contractor(controller, world):
    as_client = controller.get_contract(world.active.id, world.alice)
    as_contractor = controller.get_contract(world.active.id, world.bob)
    assert as_client == as_contractor
    assert as_client["ClientId"] == world.alice.id
    assert as_client["ContractorId"] == world.bob.id
    assert as_client["status"] == "in_progress"
    assert as_client["terms"] == "build api"


def test_get_contract_of_someone_else_is_unauthorized(controller, world):
    with pytest.raises(Unauthorized):
        controller.get_contract(world.active.id, world.dave)


def test_get_missing_contract(controller, world):
    with pytest.raises(ContractNotFound):
        controller.get_contract(404, world.alice)


def test_list_contracts_excludes_terminated(controller, world):
    ids = [c["id"] for c in controller.list_contracts(world.bob)]
    assert ids == [world.active.id]

    ids = [c["id"] for c in controller.list_contracts(world.dave)]
    assert ids == [world.small.id]


def test_list_contracts_includes_new(controller, world):
    ids = [c["id"] for c in controller.list_contracts(world.alice)]
    assert ids == [world.active.id, world.fresh.id]


def test_unpaid_jobs_only_from_in_progress_contracts(controller, world):
    jobs = controller.list_unpaid_jobs(world.alice)
    assert [j["id"] for j in jobs] == [world.job_big.id, world.job_small.id]
    assert all(j["paid"] is None for j in jobs)
    assert jobs[0]["price"] == 50.0


def test_unpaid_jobs_for_contractor(controller, world):
    assert [j["id"] for j in controller.list_unpaid_jobs(world.carol)] == [world.job_dave.id]
    # bob's terminated contract job is excluded
    assert [j["id"] for j in controller.list_unpaid_jobs(world.bob)] == [world.job_big.id, world.job_small.id]


def test_unpaid_jobs_include_paid_false(controller, db, world):
    job = db.create_job(contract_id=world.small.id, price=3, paid=False)
    ids = [j["id"] for j in controller.list_unpaid_jobs(world.dave)]
    assert ids == [world.job_dave.id, job.id]
