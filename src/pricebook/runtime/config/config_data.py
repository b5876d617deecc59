"""Typed view of the ``config`` section of config.yaml.

Every section has defaults, so an empty or missing file still yields a
usable development configuration.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, computed_field
from sqlalchemy.engine import make_url

Environment = Literal["development", "production", "test"]


class CORSConfig(BaseModel):
    """Cross-origin settings for browser clients such as the scanner page."""

    origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:5173"])
    allow_credentials: bool = True
    allow_methods: list[str] = Field(default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
    allow_headers: list[str] = Field(default=["*"])


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Minimum level for every sink")
    format: Literal["json", "plain"] = Field(default="json", description="File sink format")
    file: str | None = Field(
        default="logs/pricebook.log", description="Rotating log file; empty disables it"
    )
    max_size_mb: int = Field(default=10, description="Rotate the file at this size")
    backup_count: int = Field(default=5, description="Rotated files to keep")


class DatabaseConfig(BaseModel):
    """Where products are stored and how the engine connects."""

    url: str = Field(default="sqlite:///./pricebook.db", description="SQLAlchemy URL")
    create_tables: bool = Field(default=True, description="Create missing tables at startup")
    seed_on_startup: bool = Field(
        default=False, description="Insert pricing.seed_products at startup"
    )
    pool_size: int = Field(default=20, description="Server databases only")
    max_overflow: int = Field(default=10, description="Server databases only")
    pool_timeout: int = Field(default=30, description="Seconds to wait for a connection")
    pool_recycle: int = Field(default=1800, description="Seconds before a connection is renewed")
    password_env_var: str | None = Field(
        default=None, description="Name of the variable holding the password"
    )
    password_file: str | None = Field(
        default=None, description="Secret file holding the password"
    )

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    @computed_field
    @property
    def password(self) -> str | None:
        """Password from the URL, else the secret file, else the named variable."""
        inline = make_url(self.url).password
        if inline:
            return inline

        if self.password_file:
            try:
                return Path(self.password_file).read_text().strip()
            except OSError as e:
                raise ValueError(
                    f"Cannot read database password file {self.password_file}"
                ) from e

        if self.password_env_var:
            value = os.environ.get(self.password_env_var)
            if not value:
                raise ValueError(f"Environment variable {self.password_env_var} not set")
            return value

        return None

    @computed_field
    @property
    def connection_string(self) -> str:
        """``url`` with the resolved password filled in."""
        url = make_url(self.url)
        if self.is_sqlite or url.password:
            return self.url
        password = self.password
        if not password:
            return self.url
        return url.set(password=password).render_as_string(hide_password=False)


class SeedProductConfig(BaseModel):
    """A product inserted at initialization unless its barcode already exists."""

    barcode: str
    name: str
    price_reference: float
    weight: str = ""
    exchange_rate: float | None = None


class PricingConfig(BaseModel):
    """Currency pair and the rate new products are priced at."""

    default_exchange_rate: float = Field(
        default=89500, gt=0, description="Secondary units per reference unit"
    )
    reference_currency: str = Field(default="USD")
    secondary_currency: str = Field(default="LBP")
    seed_products: list[SeedProductConfig] = Field(default_factory=list)


class AppConfig(BaseModel):
    environment: Environment = Field(default="development")
    host: str = Field(default="localhost")
    port: int = Field(default=3000)
    cors: CORSConfig = Field(default_factory=CORSConfig)

    @property
    def base_url(self) -> str:
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root of the ``config`` section."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    app: AppConfig = Field(default_factory=AppConfig)
