"""Configuration management for rci."""

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rci.utils.error import ConfigError


class ProbeSettings(BaseSettings):
    """Settings for one probe run, from RCI_* environment variables and flags."""

    url: str = ""
    method: str = "GET"
    body: str = ""
    response_map: str = ""
    verbose: bool = False

    model_config = SettingsConfigDict(
        env_prefix="RCI_",
        extra="ignore",
        frozen=True,
    )

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        """HTTP methods are case-insensitive on the command line."""
        return v.strip().upper()


def load_settings(**overrides) -> ProbeSettings:
    """Build the settings object once at startup.

    Priority: command-line flag > RCI_* environment variable > default.
    Overrides that are None (flag not given) are ignored.

    Raises:
        ConfigError: If a value fails validation.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return ProbeSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"Configuration error: {e}", "Check the RCI_* environment variables")
