"""
Admin reports over a contract creation window.

Both reports consider jobs of in-progress contracts created between `start`
and `end` (inclusive) and rank by the sum of job prices.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select

from marketplace.database.models import Contract, Job, Profile
from marketplace.database.store import MarketplaceDB
from marketplace.errors import InvalidDateRange

logger = logging.getLogger(__name__)


def _parse_bound(value: Any, *, end_of_day: bool) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.max if end_of_day else time.min)
    else:
        raw = (value or "").strip() if isinstance(value, str) else ""
        if not raw:
            raise InvalidDateRange("Both start and end dates are required")
        try:
            if len(raw) == 10:
                d = date.fromisoformat(raw)
                parsed = datetime.combine(d, time.max if end_of_day else time.min)
            else:
                parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise InvalidDateRange(f"Invalid date: {raw}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_range(start: Any, end: Any) -> Tuple[datetime, datetime]:
    """Parse ISO `start`/`end`; a date-only `end` covers that whole day."""
    lo = _parse_bound(start, end_of_day=False)
    hi = _parse_bound(end, end_of_day=True)
    if lo > hi:
        raise InvalidDateRange()
    return lo, hi


def _money(value: Any) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01")))


class ReportsService:

    def __init__(self, db: MarketplaceDB, default_limit: int = 2):
        self.db = db
        self.default_limit = default_limit

    def best_profession(self, start: Any, end: Any) -> Optional[Dict[str, Any]]:
        lo, hi = parse_range(start, end)
        total = func.sum(Job.price).label("total")
        stmt = (
            select(Profile.profession, total)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.contractor_id == Profile.id)
            .where(Contract.status == "in_progress")
            .where(Contract.created_at.between(lo, hi))
            .where(Profile.type == "contractor")
            .group_by(Profile.profession)
            .order_by(total.desc(), Profile.profession)
            .limit(1)
        )
        with self.db.transaction() as s:
            row = s.execute(stmt).first()
        if row is None:
            logger.info("best_profession: no data between %s and %s", lo, hi)
            return None
        return {"profession": row.profession, "totalEarned": _money(row.total)}

    def best_clients(self, start: Any, end: Any, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        lo, hi = parse_range(start, end)
        limit = self.default_limit if limit is None else limit
        total = func.sum(Job.price).label("total")
        stmt = (
            select(Profile.id, Profile.first_name, Profile.last_name, total)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.client_id == Profile.id)
            .where(Contract.status == "in_progress")
            .where(Contract.created_at.between(lo, hi))
            .group_by(Profile.id, Profile.first_name, Profile.last_name)
            .order_by(total.desc(), Profile.id)
            .limit(limit)
        )
        with self.db.transaction() as s:
            rows = s.execute(stmt).all()
        return [
            {"id": r.id, "fullName": f"{r.first_name} {r.last_name}", "totalPaid": _money(r.total)}
            for r in rows
        ]
