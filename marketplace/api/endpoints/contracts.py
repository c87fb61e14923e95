from fastapi import APIRouter, Depends

from marketplace.api.dependencies import get_contracts_controller, get_profile
from marketplace.database.models import Profile
from marketplace.services.contracts import ContractsController

api = APIRouter()
contracts_api = api


@api.get("/contracts", tags=["Contracts"])
def list_contracts(
    profile: Profile = Depends(get_profile),
    controller: ContractsController = Depends(get_contracts_controller),
):
    """Non-terminated contracts where the caller is client or contractor."""
    return controller.list_contracts(profile)


@api.get("/contracts/{contract_id}", tags=["Contracts"])
def get_contract(
    contract_id: int,
    profile: Profile = Depends(get_profile),
    controller: ContractsController = Depends(get_contracts_controller),
):
    return controller.get_contract(contract_id, profile)
