"""Application configuration using pydantic-settings."""

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# Load .env file and override existing env vars
load_dotenv(override=True)

CONFIG_FILE_ENV_VAR = "DEPLOYER_CONFIG_FILE"
DEFAULT_CONFIG_FILE = "config.json"


class Settings(BaseSettings):
    """Deployer settings.

    Read from environment variables, `.env`, and the JSON config file that
    carries the CircleCI token and the billing API key. Instances are frozen:
    build one at startup and hand it to the components that need it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Secrets from config.json
    circle_api_token: str = Field(
        default="",
        validation_alias=AliasChoices("circle_api_token", "circleApiToken"),
    )
    google_cloud_billing_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "google_cloud_billing_key", "googleCloudBillingKey"
        ),
    )

    # CircleCI
    circle_base_url: str = "https://circleci.com/api/v1.1"
    circle_vcs_type: str = "github"
    circle_org: str = "DataBiosphere"
    circle_branch: str = "dev"
    circle_build_job: str = "build"
    circle_deploy_job: str = "deploy-prod"
    circle_request_timeout: float = 30.0

    # Retry budgets
    build_search_max_attempts: int = Field(default=10, ge=0)
    poll_interval_seconds: float = Field(default=10.0, ge=0)
    poll_max_attempts: int = Field(default=60, ge=1)

    # Caller / environment guard
    cron_header_name: str = "X-Appengine-Cron"
    cron_header_value: str = "true"
    production_project_id: str = "bvdp-saturn-prod"

    # Google Cloud
    gcp_project_id: str | None = None
    gcp_scopes: list[str] = Field(
        default_factory=lambda: ["https://www.googleapis.com/auth/cloud-platform"]
    )
    config_bucket: str = "bvdp-saturn-prod-config"
    config_object: str = "config.json"

    # Download prices
    billing_base_url: str = "https://cloudbilling.googleapis.com/v1"
    billing_service_id: str = "95FF-2EF5-5EA1"
    download_price_sku: str = "22EB-AAE8-FBCD"
    pricing_bucket: str = "bvdp-saturn-prod-cloud-pricing"
    pricing_object: str = "na-download-prices.json"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_directory: str | None = None
    log_file_name: str = "deployer.log"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        json_file = os.environ.get(CONFIG_FILE_ENV_VAR, DEFAULT_CONFIG_FILE)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls, json_file=json_file),
            file_secret_settings,
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def circle_repo_url_prefix(self) -> str:
        return f"https://github.com/{self.circle_org}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
