"""
SQLAlchemy models for profiles, contracts and jobs.
Used by marketplace.database.store for every read and balance mutation.
"""
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from sqlalchemy import BigInteger, Boolean, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator


PROFILE_TYPES = ("client", "contractor")
CONTRACT_STATUSES = ("new", "in_progress", "terminated")
CENT = Decimal("0.01")


class Base(DeclarativeBase):
    pass


class Cents(TypeDecorator):
    """
    Money amount stored as an integer number of cents.

    Binds Decimal/int/float/str values and loads them back as a Decimal with
    two places, so balances and prices stay exact on every backend and SQL
    arithmetic such as `balance - price` happens on integers.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        amount = Decimal(str(value))
        if amount != amount.quantize(CENT):
            raise ValueError(f"Money amount {value!r} is finer than a cent")
        return int(amount.scaleb(2))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(int(value)).scaleb(-2)


def _money(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str] = mapped_column(String(64), nullable=False)
    profession: Mapped[str] = mapped_column(String(128), nullable=False)
    balance: Mapped[Decimal] = mapped_column(Cents, default=Decimal("0"), nullable=False)
    type: Mapped[str] = mapped_column(Enum(*PROFILE_TYPES, name="profile_type"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    client_contracts: Mapped[list["Contract"]] = relationship(
        "Contract", back_populates="client", foreign_keys="Contract.client_id"
    )
    contractor_contracts: Mapped[list["Contract"]] = relationship(
        "Contract", back_populates="contractor", foreign_keys="Contract.contractor_id"
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profession": self.profession,
            "balance": _money(self.balance),
            "type": self.type,
        }


class Contract(Base):
    __tablename__ = "contracts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    terms: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(Enum(*CONTRACT_STATUSES, name="contract_status"), default="new", nullable=False)
    client_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    contractor_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    client: Mapped["Profile"] = relationship("Profile", back_populates="client_contracts", foreign_keys=[client_id])
    contractor: Mapped["Profile"] = relationship(
        "Profile", back_populates="contractor_contracts", foreign_keys=[contractor_id]
    )
    jobs: Mapped[list["Job"]] = relationship("Job", back_populates="contract", order_by="Job.id")

    def involves(self, profile_id: int) -> bool:
        return profile_id in (self.client_id, self.contractor_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "terms": self.terms,
            "status": self.status,
            "ClientId": self.client_id,
            "ContractorId": self.contractor_id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Cents, nullable=False)
    # NULL and False both mean "not paid yet"
    paid: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=None)
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    contract_id: Mapped[int] = mapped_column(Integer, ForeignKey("contracts.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    contract: Mapped["Contract"] = relationship("Contract", back_populates="jobs")

    @property
    def is_paid(self) -> bool:
        return self.paid is True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "price": _money(self.price),
            "paid": self.paid,
            "paymentDate": _iso(self.payment_date),
            "ContractId": self.contract_id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


def unpaid_clause():
    """SQL predicate matching jobs that are not paid (NULL or false)."""
    return (Job.paid.is_(None)) | (Job.paid.is_(False))
