from dataclasses import dataclass

from src.pricebook.core.services import DbSessionService, PricingEngine


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    pricing_engine: PricingEngine
