"""Runtime configuration read from environment variables and env files."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

log = logging.getLogger(__name__)

DEVELOPMENT_ENV_FILE = "env.development"
PRODUCTION_ENV_FILE = "env.production"

_DB_CREDENTIAL_FIELDS = ("db_username", "db_password", "db_database")


class ConfigError(LookupError):
    """A required setting is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    """Server and database settings."""

    server_host: str
    server_port: int | None
    db_host: str
    db_port: int
    db_username: str
    db_password: str
    db_database: str


def _require(key: str) -> str:
    try:
        return os.environ[key]
    except KeyError:
        raise ConfigError(f"environment variable {key} is not set") from None


def _parse_port(text: str) -> int | None:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    value = int(digits)
    return value if value <= 0xFFFF else None


def read_env() -> Settings:
    """Load the env file matching DEBUG and return the settings it defines."""
    log.info("checking environment")
    if _require("DEBUG") == "true":
        log.info("running in development mode")
        load_dotenv(DEVELOPMENT_ENV_FILE, override=False)
    else:
        log.info("running in production mode")
        load_dotenv(PRODUCTION_ENV_FILE, override=False)

    server_host = _require("SERVER_HOST")
    server_port = _parse_port(os.environ.get("SERVER_PORT", ""))
    db_host = _require("DB_HOST")
    db_port = _parse_port(_require("DB_PORT"))
    if db_port is None:
        raise ConfigError("DB_PORT is not a valid port number")

    credentials = {field: _require(field.upper()) for field in _DB_CREDENTIAL_FIELDS}

    return Settings(
        server_host=server_host,
        server_port=server_port,
        db_host=db_host,
        db_port=db_port,
        **credentials,
    )


def get(key: str, default: str | None = None) -> str | None:
    """Return an environment variable, or ``default`` when it is unset."""
    return os.environ.get(key, default)


def get_debug() -> bool:
    """Whether DEBUG is set to ``true``."""
    return os.environ.get("DEBUG") == "true"