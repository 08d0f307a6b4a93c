"""Configuration and logging setup for the z/OSMF client."""

import logging
import os
import pathlib
import sys
from typing import TextIO

import pydantic
import structlog

from .restapi.client import DEFAULT_TIMEOUT
from .zosmf import ZOsmf

CONFIG_ENV_VAR = "ZOSMF_CLIENT_CONFIG_PATH"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for a z/OSMF client."""

    base_url: str = pydantic.Field(description="Base URL of the z/OSMF server")
    username: str | None = pydantic.Field(None, description="User ID to log in with")
    password: pydantic.SecretStr | None = pydantic.Field(
        None,
        description="Password or passphrase for username",
    )
    token: pydantic.SecretStr | None = pydantic.Field(
        None,
        description="Pre-established session token",
    )
    token_file: str | None = pydantic.Field(
        None,
        description="Path to file containing a pre-established session token",
    )
    token_cookie: str | None = pydantic.Field(
        None,
        description="Cookie name for the session token",
    )
    verify: bool | str = pydantic.Field(
        True,
        description="TLS verification flag or path to a CA bundle",
    )
    timeout: float = pydantic.Field(
        DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")

    @pydantic.model_validator(mode="after")
    def check_password(self) -> "ClientConfig":
        if self.username and self.password is None:
            msg = "password is required when username is set"
            raise ValueError(msg)
        return self


def configure_logging(log_level_name: str, stream: TextIO | None = None) -> None:
    """Send client logs to ``stream`` (stderr by default) as logfmt lines.

    The package only logs through structlog; applications that already
    configure structlog should skip this.
    """
    level = logging.getLevelName(log_level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    renderer = structlog.processors.LogfmtRenderer(
        key_order=("timestamp", "level", "msg", "method", "url", "status"),
        drop_missing=True,
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str | pathlib.Path) -> ClientConfig:
    """Read and validate a JSON client configuration.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the content is not a valid configuration.
    """
    path = pathlib.Path(config_path)
    if not path.is_file():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)
    return ClientConfig.model_validate_json(path.read_text())


def create_zosmf(config: ClientConfig) -> ZOsmf:
    """Construct a client from validated config, logging in if configured."""
    zosmf = ZOsmf(
        config.base_url,
        token=config.token.get_secret_value() if config.token else None,
        token_file=config.token_file,
        token_cookie=config.token_cookie,
        verify=config.verify,
        timeout=config.timeout,
    )
    logger.info("Created z/OSMF client", base_url=config.base_url)

    if config.username and config.password is not None:
        zosmf.login(config.username, config.password.get_secret_value())

    return zosmf


def create_client(config_path: str | None = None) -> ZOsmf:
    """Create a client using a config path or the environment default."""
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, "zosmf.json")
    settings = load_config(resolved_path)
    configure_logging(settings.log_level)
    return create_zosmf(settings)
