"""Client self-deposits, capped by a share of the client's outstanding jobs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from marketplace.database.models import CENT, Contract, Job, Profile, unpaid_clause
from marketplace.database.store import MarketplaceDB
from marketplace.errors import DepositLimitExceeded, InvalidAmount, Unauthorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepositReceipt:
    profile_id: int
    amount: Decimal
    balance: Decimal


def _to_amount(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmount()
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmount()
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount()
    try:
        cents = amount.quantize(CENT)
    except InvalidOperation:
        raise InvalidAmount()
    if cents != amount:
        raise InvalidAmount("Deposit amount must not have fractions of a cent")
    return cents


def outstanding_total(s: Session, client_id: int) -> Decimal:
    """Sum of prices of the client's unpaid jobs on in-progress contracts."""
    total = s.execute(
        select(func.coalesce(func.sum(Job.price), 0))
        .join(Contract, Job.contract_id == Contract.id)
        .where(unpaid_clause())
        .where(Contract.client_id == client_id)
        .where(Contract.status == "in_progress")
    ).scalar_one()
    return Decimal(str(total)).quantize(CENT)


class DepositEngine:

    def __init__(self, db: MarketplaceDB, max_ratio: Any = Decimal("0.25"), retries: int = 1):
        self.db = db
        self.max_ratio = Decimal(str(max_ratio))
        self.retries = retries

    def deposit(self, user_id: int, amount: Any, requester: Profile) -> DepositReceipt:
        if requester.id != user_id or requester.type != "client":
            logger.info("Deposit refused: profile %s may not deposit into %s", requester.id, user_id)
            raise Unauthorized()

        value = _to_amount(amount)
        receipt = self.db.run_in_transaction(
            lambda s: self._deposit(s, requester.id, value),
            retries=self.retries,
            label=f"deposit for profile {requester.id}",
        )
        logger.info("Deposit successful: profile=%s amount=%s", receipt.profile_id, receipt.amount)
        return receipt

    def _cap(self, s: Session, client_id: int) -> Decimal:
        return outstanding_total(s, client_id) * self.max_ratio

    def _deposit(self, s: Session, client_id: int, amount: Decimal) -> DepositReceipt:
        cap = self._cap(s, client_id)
        if amount > cap:
            logger.info("Deposit refused: %s exceeds cap %s for profile %s", amount, cap, client_id)
            raise DepositLimitExceeded()

        s.execute(
            update(Profile)
            .where(Profile.id == client_id)
            .values(balance=Profile.balance + amount)
            .execution_options(synchronize_session=False)
        )
        balance = s.execute(select(Profile.balance).where(Profile.id == client_id)).scalar_one()
        return DepositReceipt(profile_id=client_id, amount=amount, balance=balance)
