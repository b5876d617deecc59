"""Core services exports."""

# Database Services
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# Pricing
from .pricing import PricingEngine

__all__ = [
    "DbManageService",
    "DbSessionService",
    "PricingEngine",
]
