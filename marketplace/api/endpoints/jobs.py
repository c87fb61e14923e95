from fastapi import APIRouter, Depends

from marketplace.api.dependencies import get_contracts_controller, get_payment_engine, get_profile
from marketplace.database.models import Profile
from marketplace.services.contracts import ContractsController
from marketplace.services.payments import PaymentEngine

api = APIRouter()
jobs_api = api


@api.get("/jobs/unpaid", tags=["Jobs"])
def list_unpaid_jobs(
    profile: Profile = Depends(get_profile),
    controller: ContractsController = Depends(get_contracts_controller),
):
    """Unpaid jobs of the caller's in-progress contracts."""
    return controller.list_unpaid_jobs(profile)


@api.post("/jobs/{job_id}/pay", tags=["Jobs"])
def pay_job(
    job_id: int,
    profile: Profile = Depends(get_profile),
    engine: PaymentEngine = Depends(get_payment_engine),
):
    engine.pay_job(job_id, profile)
    return {"message": "Payment successful"}
