"""Demo data for local development: a few clients, contractors, contracts and jobs."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from marketplace.database.store import MarketplaceDB

PROFILES: List[Dict[str, Any]] = [
    {"first_name": "Harry", "last_name": "Potter", "profession": "Wizard", "balance": 1150, "type": "client"},
    {"first_name": "Mr", "last_name": "Robot", "profession": "Hacker", "balance": 231.11, "type": "client"},
    {"first_name": "John", "last_name": "Snow", "profession": "Knows nothing", "balance": 451.3, "type": "client"},
    {"first_name": "Ash", "last_name": "Kethcum", "profession": "Pokemon master", "balance": 1.3, "type": "client"},
    {"first_name": "John", "last_name": "Lenon", "profession": "Musician", "balance": 64, "type": "contractor"},
    {"first_name": "Linus", "last_name": "Torvalds", "profession": "Programmer", "balance": 1214, "type": "contractor"},
    {"first_name": "Alan", "last_name": "Turing", "profession": "Programmer", "balance": 22, "type": "contractor"},
    {"first_name": "Aragorn", "last_name": "II Elessar Telcontarion", "profession": "Fighter", "balance": 314, "type": "contractor"},
]

CONTRACTS: List[Dict[str, Any]] = [
    {"terms": "bla bla bla", "status": "terminated", "client": 1, "contractor": 5},
    {"terms": "bla bla bla", "status": "in_progress", "client": 1, "contractor": 6},
    {"terms": "bla bla bla", "status": "in_progress", "client": 2, "contractor": 6},
    {"terms": "bla bla bla", "status": "in_progress", "client": 2, "contractor": 7},
    {"terms": "bla bla bla", "status": "new", "client": 3, "contractor": 8},
    {"terms": "bla bla bla", "status": "in_progress", "client": 3, "contractor": 7},
    {"terms": "bla bla bla", "status": "in_progress", "client": 4, "contractor": 7},
    {"terms": "bla bla bla", "status": "in_progress", "client": 4, "contractor": 6},
    {"terms": "bla bla bla", "status": "in_progress", "client": 4, "contractor": 8},
]

JOBS: List[Dict[str, Any]] = [
    {"description": "work", "price": 200, "contract": 1},
    {"description": "work", "price": 201, "contract": 2},
    {"description": "work", "price": 202, "contract": 3},
    {"description": "work", "price": 200, "contract": 4},
    {"description": "work", "price": 200, "contract": 7},
    {"description": "work", "price": 2020, "contract": 7, "paid": True, "payment_date": datetime(2020, 8, 15, 19, 11, 26)},
    {"description": "work", "price": 200, "contract": 2, "paid": True, "payment_date": datetime(2020, 8, 15, 19, 11, 26)},
    {"description": "work", "price": 200, "contract": 3, "paid": True, "payment_date": datetime(2020, 8, 16, 19, 11, 26)},
    {"description": "work", "price": 200, "contract": 1, "paid": True, "payment_date": datetime(2020, 8, 17, 19, 11, 26)},
    {"description": "work", "price": 200, "contract": 5, "paid": True, "payment_date": datetime(2020, 8, 17, 19, 11, 26)},
    {"description": "work", "price": 21, "contract": 1, "paid": True, "payment_date": datetime(2020, 8, 10, 19, 11, 26)},
    {"description": "work", "price": 21, "contract": 2, "paid": True, "payment_date": datetime(2020, 8, 15, 19, 11, 26)},
    {"description": "work", "price": 121, "contract": 3, "paid": True, "payment_date": datetime(2020, 8, 15, 19, 11, 26)},
    {"description": "work", "price": 121, "contract": 3, "paid": True, "payment_date": datetime(2020, 8, 14, 23, 11, 26)},
]


def seed(db: MarketplaceDB) -> Dict[str, int]:
    """
    Insert the demo rows into an empty database. Returns row counts.

    Contracts and jobs point at their profile/contract by 1-based position in
    the lists above; primary keys are left to the database so its sequences
    stay in step.
    """
    profiles = [db.create_profile(**p) for p in PROFILES]

    contracts = []
    for c in CONTRACTS:
        contracts.append(db.create_contract(
            terms=c["terms"],
            status=c["status"],
            client_id=profiles[c["client"] - 1].id,
            contractor_id=profiles[c["contractor"] - 1].id,
        ))

    for j in JOBS:
        fields = {k: v for k, v in j.items() if k != "contract"}
        db.create_job(contract_id=contracts[j["contract"] - 1].id, **fields)

    return {"profiles": len(profiles), "contracts": len(contracts), "jobs": len(JOBS)}
