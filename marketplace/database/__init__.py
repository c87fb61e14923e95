from .models import Base, Contract, Job, Profile
from .store import MarketplaceDB

__all__ = ["Base", "Contract", "Job", "Profile", "MarketplaceDB"]
