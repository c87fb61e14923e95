import logging

from fastapi import Depends, Request

from marketplace.database.models import Profile
from marketplace.database.store import MarketplaceDB
from marketplace.errors import MissingIdentity, UnknownIdentity

logger = logging.getLogger(__name__)

PROFILE_HEADER = "profile_id"


def get_db(request: Request) -> MarketplaceDB:
    """Dependency for the store attached to the running app"""
    return request.app.state.db


def get_profile(request: Request, db: MarketplaceDB = Depends(get_db)) -> Profile:
    """
    Resolve the caller from the `profile_id` header.

    This is identity resolution only; no credential is verified. Routes and
    engines only ever see the resolved Profile, so a real credential check
    can replace this dependency without touching them.
    """
    raw = (request.headers.get(PROFILE_HEADER) or "").strip()
    if not raw:
        raise MissingIdentity()

    try:
        profile_id = int(raw)
    except ValueError:
        logger.info("Rejected non-numeric %s header: %r", PROFILE_HEADER, raw)
        raise UnknownIdentity()

    profile = db.get_profile(profile_id)
    if profile is None:
        raise UnknownIdentity()

    request.state.profile = profile
    return profile


def get_payment_engine(request: Request):
    return request.app.state.payments


def get_deposit_engine(request: Request):
    return request.app.state.deposits


def get_contracts_controller(request: Request):
    return request.app.state.contracts


def get_reports_service(request: Request):
    return request.app.state.reports
