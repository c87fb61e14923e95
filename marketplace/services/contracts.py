"""Controller for contract lookups and unpaid job listings.

Keeps ownership checks out of the FastAPI layer; routes only translate the
returned dictionaries into responses.
"""

from typing import Any, Dict, List

from marketplace.database.models import Profile
from marketplace.errors import ContractNotFound, Unauthorized


class ContractsController:

    def __init__(self, db):
        self.db = db

    def get_contract(self, contract_id: int, profile: Profile) -> Dict[str, Any]:
        contract = self.db.get_contract(contract_id)
        if not contract:
            raise ContractNotFound()
        if not contract.involves(profile.id):
            raise Unauthorized("Unauthorized: Contract does not belong to the requesting profile")
        return contract.to_dict()

    def list_contracts(self, profile: Profile) -> List[Dict[str, Any]]:
        return [c.to_dict() for c in self.db.list_contracts_for_profile(profile.id)]

    def list_unpaid_jobs(self, profile: Profile) -> List[Dict[str, Any]]:
        return [j.to_dict() for j in self.db.list_unpaid_jobs_for_profile(profile.id)]
