"""
Job payment: move a job's price from the client's balance to the
contractor's balance.

Flow (one store transaction, retried once on a store conflict):
1. Load the job together with its contract, locking the row
2. Only the contract's client may pay
3. A paid job is never paid again (AlreadyPaid)
4. The contract must be in progress
5. The client's balance must cover the price
6. Mark the job paid, debit the client, credit the contractor

Steps 3 and 5 are re-checked by the UPDATE statements themselves, so a
concurrent writer that slipped in after the read makes the transaction roll
back instead of overdrawing or double paying.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from marketplace.database.models import Contract, Job, Profile, unpaid_clause
from marketplace.database.store import MarketplaceDB
from marketplace.errors import (
    AlreadyPaid,
    ContractNotActive,
    InsufficientBalance,
    JobNotFound,
    Unauthorized,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentReceipt:
    job_id: int
    amount: Decimal
    client_id: int
    contractor_id: int
    paid_at: datetime


class PaymentEngine:

    def __init__(self, db: MarketplaceDB, retries: int = 1):
        self.db = db
        self.retries = retries

    def pay_job(self, job_id: int, payer: Profile) -> PaymentReceipt:
        receipt = self.db.run_in_transaction(
            lambda s: self._pay(s, job_id, payer.id),
            retries=self.retries,
            label=f"payment of job {job_id}",
        )
        logger.info(
            "Payment successful: job=%s amount=%s client=%s contractor=%s",
            receipt.job_id,
            receipt.amount,
            receipt.client_id,
            receipt.contractor_id,
        )
        return receipt

    def _pay(self, s: Session, job_id: int, payer_id: int) -> PaymentReceipt:
        row = s.execute(
            select(Job, Contract)
            .join(Contract, Job.contract_id == Contract.id)
            .where(Job.id == job_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).one_or_none()
        if row is None:
            raise JobNotFound()
        job, contract = row

        if contract.client_id != payer_id:
            logger.info("Payment refused: profile %s is not the client of job %s", payer_id, job_id)
            raise Unauthorized("Unauthorized: Only the contract's client can pay for this job")

        if job.is_paid:
            raise AlreadyPaid()

        if contract.status != "in_progress":
            raise ContractNotActive()

        price = job.price
        balance = s.execute(select(Profile.balance).where(Profile.id == payer_id)).scalar_one()
        if balance < price:
            logger.info("Payment refused: balance %s below price %s for job %s", balance, price, job_id)
            raise InsufficientBalance()

        now = datetime.utcnow()
        claimed = s.execute(
            update(Job)
            .where(Job.id == job_id, unpaid_clause())
            .values(paid=True, payment_date=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount != 1:
            raise AlreadyPaid()

        debited = s.execute(
            update(Profile)
            .where(Profile.id == payer_id, Profile.balance >= price)
            .values(balance=Profile.balance - price, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if debited.rowcount != 1:
            raise InsufficientBalance()

        s.execute(
            update(Profile)
            .where(Profile.id == contract.contractor_id)
            .values(balance=Profile.balance + price, updated_at=now)
            .execution_options(synchronize_session=False)
        )

        return PaymentReceipt(
            job_id=job.id,
            amount=price,
            client_id=payer_id,
            contractor_id=contract.contractor_id,
            paid_at=now,
        )
