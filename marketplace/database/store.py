"""
SQLAlchemy-backed store for profiles, contracts and jobs.

Works against PostgreSQL in production (DATABASE_URL) and SQLite for local
development and tests. Engines receive an instance of `MarketplaceDB`; nothing
looks the store up through module globals.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterator, List, Optional, TypeVar

from sqlalchemy import create_engine, event, or_, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.database.models import Base, Contract, Job, Profile, unpaid_clause
from marketplace.errors import TransientStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _normalize_connection_string(s: str) -> str:
    """Strip common mistakes: 'psql \'...\'', extra quotes, whitespace."""
    s = s.strip()
    if re.match(r"^psql\s+", s, re.IGNORECASE):
        s = re.sub(r"^psql\s+", "", s, flags=re.IGNORECASE).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    return s


def _install_sqlite_locking(engine) -> None:
    # pysqlite defers BEGIN until the first write; take the write lock up front
    # so a read-check-write sequence cannot interleave with another writer.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class MarketplaceDB:
    """
    Data access for the marketplace using SQLAlchemy.
    """

    def __init__(
        self,
        connection_string: str,
        *,
        pool_size: int = 5,
        max_overflow: int = 10,
        sqlite_timeout: float = 30.0,
        echo: bool = False,
    ) -> None:
        connection_string = _normalize_connection_string(connection_string)
        self.is_sqlite = connection_string.startswith("sqlite")
        if self.is_sqlite:
            kwargs: dict[str, Any] = {
                "connect_args": {"check_same_thread": False, "timeout": sqlite_timeout},
            }
            if ":memory:" in connection_string or connection_string.rstrip("/") == "sqlite:":
                kwargs["poolclass"] = StaticPool
            self.engine = create_engine(connection_string, echo=echo, **kwargs)
            _install_sqlite_locking(self.engine)
        else:
            self.engine = create_engine(
                connection_string,
                echo=echo,
                pool_pre_ping=True,
                pool_size=pool_size,
                max_overflow=max_overflow,
                isolation_level="READ COMMITTED",
            )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        s = self.SessionLocal()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    def run_in_transaction(self, work: Callable[[Session], T], *, retries: int = 1, label: str = "transaction") -> T:
        """
        Run `work(session)` inside one transaction.

        Store conflicts (lock timeouts, serialization failures, deadlocks) roll
        the transaction back and are retried with a fresh session up to
        `retries` times; after that a TransientStoreError is raised. Any other
        exception rolls back and propagates unchanged.
        """
        attempt = 0
        while True:
            try:
                with self.transaction() as s:
                    return work(s)
            except OperationalError as e:
                if attempt >= retries:
                    logger.error("%s failed after %d attempt(s): %s", label, attempt + 1, e.orig)
                    raise TransientStoreError() from e
                attempt += 1
                logger.warning("%s conflicted (%s), retrying with a fresh read", label, e.orig)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.exec_driver_sql("SELECT 1")
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", e)
            return False

    # ------------------------------------------------------------------ #
    # Profiles
    # ------------------------------------------------------------------ #
    def create_profile(
        self,
        *,
        first_name: str,
        last_name: str,
        profession: str,
        type: str,
        balance: Any = 0,
    ) -> Profile:
        with self.transaction() as s:
            p = Profile(
                first_name=first_name,
                last_name=last_name,
                profession=profession,
                type=type,
                balance=Decimal(str(balance)),
            )
            s.add(p)
            s.flush()
            s.refresh(p)
            return p

    def get_profile(self, profile_id: int) -> Optional[Profile]:
        with self.transaction() as s:
            return s.get(Profile, profile_id)

    # ------------------------------------------------------------------ #
    # Contracts
    # ------------------------------------------------------------------ #
    def create_contract(
        self,
        *,
        client_id: int,
        contractor_id: int,
        status: str = "new",
        terms: str = "",
        created_at: Optional[datetime] = None,
    ) -> Contract:
        now = created_at or datetime.utcnow()
        with self.transaction() as s:
            c = Contract(
                client_id=client_id,
                contractor_id=contractor_id,
                status=status,
                terms=terms,
                created_at=now,
                updated_at=now,
            )
            s.add(c)
            s.flush()
            s.refresh(c)
            return c

    def get_contract(self, contract_id: int) -> Optional[Contract]:
        with self.transaction() as s:
            return s.get(Contract, contract_id)

    def list_contracts_for_profile(self, profile_id: int, include_terminated: bool = False) -> List[Contract]:
        with self.transaction() as s:
            stmt = select(Contract).where(
                or_(Contract.client_id == profile_id, Contract.contractor_id == profile_id)
            )
            if not include_terminated:
                stmt = stmt.where(Contract.status != "terminated")
            return list(s.execute(stmt.order_by(Contract.id)).scalars().all())

    # ------------------------------------------------------------------ #
    # Jobs
    # ------------------------------------------------------------------ #
    def create_job(
        self,
        *,
        contract_id: int,
        price: Any,
        description: str = "",
        paid: Optional[bool] = None,
        payment_date: Optional[datetime] = None,
    ) -> Job:
        with self.transaction() as s:
            j = Job(
                contract_id=contract_id,
                price=Decimal(str(price)),
                description=description,
                paid=paid,
                payment_date=payment_date,
                created_at=datetime.utcnow(),
                updated_at=datetime.utcnow(),
            )
            s.add(j)
            s.flush()
            s.refresh(j)
            return j

    def get_job(self, job_id: int) -> Optional[Job]:
        with self.transaction() as s:
            return s.get(Job, job_id)

    def list_unpaid_jobs_for_profile(self, profile_id: int) -> List[Job]:
        with self.transaction() as s:
            stmt = (
                select(Job)
                .join(Contract, Job.contract_id == Contract.id)
                .where(unpaid_clause())
                .where(Contract.status == "in_progress")
                .where(or_(Contract.client_id == profile_id, Contract.contractor_id == profile_id))
                .order_by(Job.id)
            )
            return list(s.execute(stmt).scalars().all())
