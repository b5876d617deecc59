"""Bootstrap values needed before config.yaml can be located and rendered."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.pricebook.runtime.config.config_data import Environment


class EnvironmentVariables(BaseSettings):
    """Read from the process environment, then ``.env``; blank values count as unset."""

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    # Selects the <ENV>_ override prefix applied while rendering config.yaml
    environment: Environment = Field(default="development", validation_alias="APP_ENVIRONMENT")
    config_file: str = Field(default="config.yaml", validation_alias="PRICEBOOK_CONFIG")
