"""Application configuration management via pydantic-settings.

Centralize all configuration parameters for the API Tester service. Load
settings from environment variables and/or a `.env` file, and resolve the
datasource descriptor that a mounted secret may override at startup.
"""

from functools import lru_cache
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.apitester.core.logging_config import get_logger

logger = get_logger(__name__)


class Settings(BaseSettings):
    """Application-wide configuration settings.

    Attributes:
        PROJECT_NAME: Display name for the application.
        ENVIRONMENT: Deployment environment identifier.
        LOG_LEVEL: Minimum logging verbosity level.
        HOST: Interface the HTTP server binds to.
        PORT: Port the HTTP server listens on.
        APPLICATION_ROLE: Role label shown on the info page.
        APPLICATION_VERSION: Version string reported by ``/version``.
        SPRING_PROFILES_ACTIVE: Active profile name shown on the info pages.
        VOLUME_PATH_PERSISTENT_VOLUME_DATA: Directory backed by a persistent volume.
        VOLUME_PATH_POD_VOLUME_DATA: Directory backed by pod-local storage.
        POSTGRESQL_FILEPATH: Mount path of the optional datasource secret.
        DATASOURCE_DRIVER_CLASS_NAME: Default datasource driver.
        DATASOURCE_URL: Default datasource connection URL.
        DATASOURCE_USERNAME: Default datasource user.
        DATASOURCE_PASSWORD: Default datasource password.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # ==========================================================================
    # PROJECT METADATA
    # ==========================================================================
    PROJECT_NAME: str = "API Tester"

    # ==========================================================================
    # ENVIRONMENT & LOGGING
    # ==========================================================================
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    LOG_LEVEL: Literal["debug", "info", "warning", "error", "critical"] = "info"
    LOGGING_NOISY_MODULES: list[str] = [
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "httpcore",
        "asyncio",
    ]

    # ==========================================================================
    # SERVER
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # ==========================================================================
    # APPLICATION
    # ==========================================================================
    APPLICATION_ROLE: str = "ALL"
    APPLICATION_VERSION: str = "Api Tester v1.0.0"
    SPRING_PROFILES_ACTIVE: str = "default"

    # ==========================================================================
    # VOLUMES
    # ==========================================================================
    VOLUME_PATH_PERSISTENT_VOLUME_DATA: str = "./files/pv/"
    VOLUME_PATH_POD_VOLUME_DATA: str = "./files/pod/"

    # ==========================================================================
    # DATASOURCE (display only, never connected)
    # ==========================================================================
    # Values below are the defaults; the secret at POSTGRESQL_FILEPATH wins.
    POSTGRESQL_FILEPATH: str = "/etc/config/postgresql.yaml"
    DATASOURCE_DRIVER_CLASS_NAME: str = "org.postgresql.Driver"
    DATASOURCE_URL: str = "jdbc:postgresql://localhost:5432/db"
    DATASOURCE_USERNAME: str = "user"
    DATASOURCE_PASSWORD: SecretStr = SecretStr("pass")


class DatasourceConfig(BaseModel):
    """Resolved datastore descriptor shown on the info page.

    Attributes:
        driver_class_name: JDBC-style driver class name.
        url: Connection URL.
        username: Database user.
        password: Database password.
    """

    model_config = ConfigDict(frozen=True)

    driver_class_name: str
    url: str
    username: str
    password: SecretStr


class DatasourceSecret(BaseModel):
    """Shape of the mounted datasource secret document.

    Keys follow the hyphenated Spring datasource naming. Missing keys parse
    as empty strings and never override a default. Numeric scalars such as
    an all-digit password are taken as their string form.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    driver_class_name: str = Field("", alias="driver-class-name")
    url: str = ""
    username: str = ""
    password: str = ""


def default_datasource(settings: Settings) -> DatasourceConfig:
    """Build the datasource descriptor from settings defaults only."""
    return DatasourceConfig(
        driver_class_name=settings.DATASOURCE_DRIVER_CLASS_NAME,
        url=settings.DATASOURCE_URL,
        username=settings.DATASOURCE_USERNAME,
        password=settings.DATASOURCE_PASSWORD,
    )


def load_datasource(settings: Settings) -> DatasourceConfig:
    """Resolve the datasource descriptor, applying the mounted secret if any.

    Resolution rules:
        1. Secret file absent: defaults are kept silently.
        2. Secret file valid: every non-empty key overrides its default.
        3. Secret file unreadable or malformed: the error is logged and the
           defaults are kept.

    Args:
        settings: Application settings holding defaults and the secret path.

    Returns:
        The resolved, immutable datasource descriptor.
    """
    defaults = default_datasource(settings)
    path = settings.POSTGRESQL_FILEPATH

    try:
        # Bytes let PyYAML report undecodable input as a ReaderError.
        with open(path, "rb") as f:
            raw: Any = yaml.safe_load(f)
    except FileNotFoundError:
        return defaults
    except (OSError, yaml.YAMLError) as e:
        logger.error("Error parsing datasource secret", path=path, error=str(e))
        return defaults

    try:
        secret = DatasourceSecret.model_validate(raw or {})
    except ValidationError as e:
        logger.error("Error parsing datasource secret", path=path, error=str(e))
        return defaults

    overrides: dict[str, Any] = {
        "driver_class_name": secret.driver_class_name,
        "url": secret.url,
        "username": secret.username,
    }
    if secret.password:
        overrides["password"] = SecretStr(secret.password)

    resolved = defaults.model_copy(
        update={key: value for key, value in overrides.items() if value}
    )
    logger.info("DataSource properties loaded from YAML file", path=path)
    return resolved


# ==============================================================================
# DEPENDENCY INJECTION
# ==============================================================================


@lru_cache()
def get_settings() -> Settings:
    """Return a cached singleton instance of the application settings.

    Use as a FastAPI dependency to inject configuration into route handlers.

    Returns:
        The singleton Settings instance.
    """
    return Settings()
