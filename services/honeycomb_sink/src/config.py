from typing import Optional

from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigMissingError

# -----------------------
# Settings and constants
# -----------------------

HONEYCOMB_EVENTS_URL = "https://api.honeycomb.io:443/1/events/"


class HoneycombSettings(BaseSettings):
    """Destination and credential; both required, no defaults."""

    honeycomb_dataset: str
    honeycomb_api_key: SecretStr

    # Environment only; read fresh on every invocation
    model_config = SettingsConfigDict(extra="ignore")


class ServiceSettings(BaseSettings):

    service_name: str = "honeycomb-sink"
    environment: str = "local"
    log_level: str = "INFO"
    use_cloud_trace: bool = False

    # Unset means no timeout on the Honeycomb call
    honeycomb_timeout_s: Optional[float] = None

    model_config = SettingsConfigDict(extra="ignore")


def load_honeycomb_settings() -> HoneycombSettings:
    try:
        return HoneycombSettings()  # type: ignore
    except ValidationError as e:
        missing = [
            str(err["loc"][0]).upper()
            for err in e.errors()
            if err.get("type") == "missing" and err.get("loc")
        ]
        if not missing:
            raise
        raise ConfigMissingError(missing) from e


service_settings = ServiceSettings()
