"""
Configuration for the Redfish provider.

Reads from environment variables with sensible defaults. Values given in a
resource's redfish_server block take precedence over the provider-level
credentials defined here.
"""

import logging
import os
from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Provider settings loaded from environment."""

    # Provider-level BMC credentials
    user: Optional[str] = os.getenv("REDFISH_USER")
    password: Optional[str] = os.getenv("REDFISH_PASSWORD")

    # SSL verification (BMCs ship self-signed certificates)
    ssl_insecure: bool = os.getenv("REDFISH_SSL_INSECURE", "true").lower() == "true"

    # Power operation defaults
    default_reset_type: str = os.getenv("REDFISH_DEFAULT_RESET_TYPE", "ForceRestart")
    default_reset_timeout: int = int(os.getenv("REDFISH_DEFAULT_RESET_TIMEOUT", "120"))
    default_check_interval: int = Field(default=int(os.getenv("REDFISH_DEFAULT_CHECK_INTERVAL", "10")), gt=0)

    # HTTP timeouts (seconds)
    request_connect_timeout: int = int(os.getenv("REDFISH_REQUEST_CONNECT_TIMEOUT", "5"))
    request_read_timeout: int = int(os.getenv("REDFISH_REQUEST_READ_TIMEOUT", "30"))

    # BMC reachability check after disruptive changes
    server_status_grace_period: int = int(os.getenv("REDFISH_SERVER_STATUS_GRACE_PERIOD", "30"))
    server_status_interval: int = Field(default=int(os.getenv("REDFISH_SERVER_STATUS_INTERVAL", "10")), gt=0)
    server_status_timeout: int = int(os.getenv("REDFISH_SERVER_STATUS_TIMEOUT", "600"))

    # Logging
    log_level: str = os.getenv("REDFISH_LOG_LEVEL", "INFO")

    class Config:
        env_prefix = "REDFISH_"


settings = Settings()


def configure_logging(level: Optional[str] = None):
    """Configure root logging for the provider process."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
