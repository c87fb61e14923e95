from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from marketplace.api.dependencies import get_deposit_engine, get_profile
from marketplace.database.models import Profile
from marketplace.services.deposits import DepositEngine

api = APIRouter()
balances_api = api


class DepositRequest(BaseModel):
    # validated by the deposit engine so booleans and sub-cent values get a 400
    amount: Any = Field(..., description="Amount to add to the caller's balance")


@api.post("/balances/deposit/{user_id}", tags=["Balances"])
def deposit(
    user_id: int,
    request: DepositRequest,
    profile: Profile = Depends(get_profile),
    engine: DepositEngine = Depends(get_deposit_engine),
):
    engine.deposit(user_id, request.amount, profile)
    return {"message": "Deposit successful"}
